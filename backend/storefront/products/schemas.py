from datetime import datetime

from pydantic import BaseModel, ConfigDict

from storefront.categories.schemas import CategoryRef


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    price: float
    image: str | None = None
    slug: str
    user_id: str
    categories: list[CategoryRef] = []
    created_at: datetime
    updated_at: datetime


class ProductPage(BaseModel):
    products: list[ProductOut]
    total: int
    total_pages: int
    current_page: int
