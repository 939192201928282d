from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.auth.deps import get_current_user
from storefront.auth.schemas import AuthUser
from storefront.categories import service
from storefront.categories.schemas import CategoryCreate, CategoryOut, CategoryUpdate
from storefront.core.responses import ApiResponse, ok
from storefront.core.schemas import CountWithDates
from storefront.db.session import get_db

router = APIRouter()


@router.get("/length", response_model=ApiResponse[int])
def categories_length(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    return ok("Categories length retrieved successfully", service.count_categories(db))


@router.get("/length-date", response_model=ApiResponse[CountWithDates])
def categories_length_and_date(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    return ok(
        "Total categories and creation dates retrieved successfully",
        CountWithDates(
            count=service.count_categories(db),
            creation_dates=service.category_creation_dates(db),
        ),
    )


@router.post("", status_code=201, response_model=ApiResponse[CategoryOut])
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    category = service.create_category(db, payload.name)
    return ok("Category created successfully", CategoryOut.model_validate(category))


@router.get("", response_model=ApiResponse[list[CategoryOut]])
def list_categories(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    categories = service.list_categories(db)
    return ok(
        "Categories retrieved successfully",
        [CategoryOut.model_validate(c) for c in categories],
    )


@router.put("/{category_id}", response_model=ApiResponse[CategoryOut])
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    category = service.update_category(db, category_id, payload.name)
    return ok("Category updated successfully", CategoryOut.model_validate(category))


@router.delete("/{category_id}", response_model=ApiResponse[dict])
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    service.delete_category(db, category_id)
    return ok("Category deleted successfully", {})
