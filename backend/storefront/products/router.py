from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from storefront.auth.deps import get_current_user
from storefront.auth.schemas import AuthUser
from storefront.core.pagination import PageParams, page_params, total_pages
from storefront.core.responses import ApiResponse, ok
from storefront.core.schemas import CountWithDates
from storefront.db.session import get_db
from storefront.products import service
from storefront.products.schemas import ProductOut, ProductPage

router = APIRouter()


async def _read_upload(file: UploadFile | None) -> service.ImageUpload | None:
    if file is None or not file.filename:
        return None
    return service.ImageUpload(filename=file.filename, raw=await file.read())


@router.get("/search", response_model=ApiResponse[list[ProductOut]])
def search_products(
    q: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    products = service.search_products(db, q)
    return ok(
        "Products retrieved successfully",
        [ProductOut.model_validate(p) for p in products],
    )


@router.get("/product-length", response_model=ApiResponse[int])
def products_length(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    return ok("Total products retrieved successfully", service.count_products(db))


@router.get("/length-date", response_model=ApiResponse[CountWithDates])
def products_length_and_date(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    return ok(
        "Total products and creation dates retrieved successfully",
        CountWithDates(
            count=service.count_products(db),
            creation_dates=service.product_creation_dates(db),
        ),
    )


@router.post("", status_code=201, response_model=ApiResponse[ProductOut])
async def create_product(
    title: str = Form(...),
    description: str = Form(default=""),
    price: float = Form(...),
    category_ids: list[str] | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    product = service.create_product(
        db,
        owner_id=current_user.id,
        title=title,
        description=description,
        price=price,
        category_ids=category_ids,
        image=await _read_upload(image),
    )
    return ok("Product created successfully", ProductOut.model_validate(product))


@router.get("", response_model=ApiResponse[ProductPage])
def list_products(
    paging: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    products, total = service.list_products(db, offset=paging.offset, limit=paging.limit)
    return ok(
        "Products retrieved successfully",
        ProductPage(
            products=[ProductOut.model_validate(p) for p in products],
            total=total,
            total_pages=total_pages(total, paging.limit),
            current_page=paging.page,
        ),
    )


@router.get("/{slug}", response_model=ApiResponse[ProductOut])
def get_product(
    slug: str,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    product = service.get_product_or_404(db, slug)
    return ok("Product retrieved successfully", ProductOut.model_validate(product))


@router.put("/{slug}", response_model=ApiResponse[ProductOut])
async def update_product(
    slug: str,
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    price: float | None = Form(default=None),
    category_ids: list[str] | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    product = service.update_product(
        db,
        slug,
        user_id=current_user.id,
        title=title,
        description=description,
        price=price,
        category_ids=category_ids,
        image=await _read_upload(image),
    )
    return ok("Product updated successfully", ProductOut.model_validate(product))


@router.delete("/{slug}", response_model=ApiResponse[dict])
def delete_product(
    slug: str,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    service.delete_product(db, slug, user_id=current_user.id)
    return ok("Product deleted successfully", {})
