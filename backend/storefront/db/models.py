from storefront.auth.models import User  # noqa: F401
from storefront.categories.models import Category  # noqa: F401
from storefront.products.models import Product, ProductCategory  # noqa: F401
from storefront.leads.models import Lead  # noqa: F401
from storefront.comments.models import Comment  # noqa: F401
