import logging
import secrets
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.auth.validation import validate_text
from storefront.categories.models import Category
from storefront.core.config import settings
from storefront.core.errors import Conflict, Forbidden, NotFound, PayloadTooLarge, ValidationError
from storefront.core.slug import make_slug, unique_slug
from storefront.products import images
from storefront.products.models import Product, ProductCategory

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    filename: str
    raw: bytes


def slug_exists(db: Session, slug: str) -> bool:
    return db.execute(select(Product.id).where(Product.slug == slug)).first() is not None


def _product_slug(db: Session, title: str, current_slug: str | None = None) -> str:
    if not make_slug(title):
        raise ValidationError("Title must contain at least one letter or digit")
    return unique_slug(
        None,
        title,
        lambda s: s != current_slug and slug_exists(db, s),
        max_attempts=settings.SLUG_MAX_ATTEMPTS,
    )


def _load_categories(db: Session, category_ids: list[str] | None) -> list[Category]:
    ids = list(dict.fromkeys(c.strip() for c in (category_ids or []) if c and c.strip()))
    if not ids:
        raise ValidationError("At least one category ID is required")
    categories = db.execute(select(Category).where(Category.id.in_(ids))).scalars().all()
    if len(categories) != len(ids):
        raise NotFound("One or more categories not found")
    return list(categories)


def _store_image(upload: ImageUpload | None) -> str:
    if not upload or not upload.filename or not upload.raw:
        raise ValidationError("Please provide a valid image file")
    if len(upload.raw) > settings.MAX_UPLOAD_BYTES:
        raise PayloadTooLarge(f"Image too large (max {settings.MAX_UPLOAD_BYTES} bytes)")
    try:
        return images.save_image(upload.raw, upload.filename)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def get_product_or_404(db: Session, slug: str) -> Product:
    product = db.execute(select(Product).where(Product.slug == slug)).scalar_one_or_none()
    if not product:
        raise NotFound("Product not found")
    return product


def _get_owned_product(db: Session, slug: str, user_id: str, action: str) -> Product:
    product = get_product_or_404(db, slug)
    if product.user_id != user_id:
        raise Forbidden(f"You are not authorized to {action} this product")
    return product


def _commit_with_slug_retry(db: Session, product: Product) -> None:
    """Commit; if another request took the slug meanwhile, recompute it once."""
    try:
        db.commit()
        return
    except IntegrityError:
        db.rollback()
    if slug_exists(db, product.slug):
        product.slug = _product_slug(db, product.title)
        db.add(product)
        try:
            db.commit()
            return
        except IntegrityError:
            db.rollback()
    raise Conflict("A product with this slug already exists")


def create_product(
    db: Session,
    *,
    owner_id: str,
    title: str | None,
    description: str | None,
    price: float | None,
    category_ids: list[str] | None,
    image: ImageUpload | None,
) -> Product:
    title = validate_text(title, "title").lower()
    categories = _load_categories(db, category_ids)
    if price is None or price < 0:
        raise ValidationError("Please provide a valid price")
    slug = _product_slug(db, title)

    filename = _store_image(image)
    product = Product(
        id=f"prd_{secrets.token_hex(12)}",
        title=title,
        description=(description or "").strip().lower(),
        price=float(price),
        image=filename,
        slug=slug,
        user_id=owner_id,
    )
    product.category_links = [ProductCategory(category=c) for c in categories]
    db.add(product)
    try:
        _commit_with_slug_retry(db, product)
    except Exception:
        images.remove_image(filename)
        raise
    db.refresh(product)
    logger.info("Product %s created by %s", product.slug, owner_id)
    return product


def list_products(db: Session, *, offset: int, limit: int) -> tuple[list[Product], int]:
    rows = db.execute(
        select(Product).order_by(Product.created_at.desc()).offset(offset).limit(limit)
    ).scalars().all()
    return list(rows), count_products(db)


def search_products(db: Session, q: str | None) -> list[Product]:
    if not q or not q.strip():
        raise ValidationError("Please provide a search query")
    pattern = f"%{q.strip()}%"
    return list(
        db.execute(
            select(Product).where(Product.title.ilike(pattern)).order_by(Product.created_at.desc())
        ).scalars().all()
    )


def update_product(
    db: Session,
    slug: str,
    *,
    user_id: str,
    title: str | None = None,
    description: str | None = None,
    price: float | None = None,
    category_ids: list[str] | None = None,
    image: ImageUpload | None = None,
) -> Product:
    product = _get_owned_product(db, slug, user_id, "update")

    if title and title.strip().lower() != product.title:
        product.title = validate_text(title, "title").lower()
        product.slug = _product_slug(db, product.title, current_slug=product.slug)

    if description and description.strip().lower() != product.description:
        product.description = validate_text(description, "description").lower()

    if price is not None and float(price) != product.price:
        if price < 0:
            raise ValidationError("Please provide a valid price")
        product.price = float(price)

    if category_ids:
        wanted = {c.id: c for c in _load_categories(db, category_ids)}
        current = {link.category_id for link in product.category_links}
        if set(wanted) != current:
            product.category_links = [
                link for link in product.category_links if link.category_id in wanted
            ] + [ProductCategory(category=c) for cid, c in wanted.items() if cid not in current]

    old_image = None
    new_image = None
    if image and image.raw:
        new_image = _store_image(image)
        old_image, product.image = product.image, new_image

    db.add(product)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        images.remove_image(new_image)
        raise Conflict("A product with this slug already exists")
    images.remove_image(old_image)
    db.refresh(product)
    return product


def delete_product(db: Session, slug: str, *, user_id: str) -> None:
    product = _get_owned_product(db, slug, user_id, "delete")
    filename = product.image
    db.delete(product)
    db.commit()
    images.remove_image(filename)


def delete_products_owned_by(db: Session, user_id: str) -> list[str]:
    """
    Mark every product of ``user_id`` for deletion and return their image names.
    The caller commits, then removes the images.
    """
    products = db.execute(select(Product).where(Product.user_id == user_id)).scalars().all()
    filenames = [p.image for p in products]
    for product in products:
        db.delete(product)
    db.flush()
    return filenames


def count_products(db: Session) -> int:
    return int(db.execute(select(func.count(Product.id))).scalar() or 0)


def product_creation_dates(db: Session) -> list:
    rows = db.execute(select(Product.created_at).order_by(Product.created_at)).scalars().all()
    return [row.date() for row in rows]
