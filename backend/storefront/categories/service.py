import secrets

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.auth.validation import validate_text
from storefront.categories.models import Category
from storefront.core.errors import NotFound


def get_category_or_404(db: Session, category_id: str) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFound("Category not found")
    return category


def create_category(db: Session, name: str) -> Category:
    name = validate_text(name, "category name").lower()
    category = Category(id=f"cat_{secrets.token_hex(12)}", name=name)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def list_categories(db: Session) -> list[Category]:
    return list(db.execute(select(Category).order_by(Category.created_at)).scalars().all())


def update_category(db: Session, category_id: str, name: str) -> Category:
    category = get_category_or_404(db, category_id)
    category.name = validate_text(name, "category name").lower()
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: str) -> None:
    category = get_category_or_404(db, category_id)
    # product links go with it (delete-orphan cascade)
    db.delete(category)
    db.commit()


def count_categories(db: Session) -> int:
    return int(db.execute(select(func.count(Category.id))).scalar() or 0)


def category_creation_dates(db: Session) -> list:
    rows = db.execute(select(Category.created_at).order_by(Category.created_at)).scalars().all()
    return [row.date() for row in rows]
