from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.auth.deps import get_current_user
from storefront.auth.schemas import AuthUser
from storefront.comments import service
from storefront.comments.schemas import CommentCreate, CommentOut, CommentPage, CommentUpdate
from storefront.core.pagination import PageParams, page_params, total_pages
from storefront.core.responses import ApiResponse, ok
from storefront.db.session import get_db

router = APIRouter()


@router.post("", status_code=201, response_model=ApiResponse[CommentOut])
def create_comment(
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    comment = service.create_comment(db, message=payload.message, lead_id=payload.lead_id)
    return ok("Comment created successfully", CommentOut.model_validate(comment))


@router.get("/lead/{lead_id}", response_model=ApiResponse[CommentPage])
def list_comments(
    lead_id: str,
    paging: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    comments, total = service.list_comments(db, lead_id, offset=paging.offset, limit=paging.limit)
    return ok(
        "Comments retrieved successfully",
        CommentPage(
            comments=[CommentOut.model_validate(c) for c in comments],
            total=total,
            total_pages=total_pages(total, paging.limit),
            current_page=paging.page,
        ),
    )


@router.get("/{comment_id}", response_model=ApiResponse[CommentOut])
def get_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    comment = service.get_comment_or_404(db, comment_id)
    return ok("Comment retrieved successfully", CommentOut.model_validate(comment))


@router.put("/{comment_id}", response_model=ApiResponse[CommentOut])
def update_comment(
    comment_id: str,
    payload: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    comment = service.update_comment(db, comment_id, payload.message)
    return ok("Comment updated successfully", CommentOut.model_validate(comment))


@router.delete("/{comment_id}", response_model=ApiResponse[dict])
def delete_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    service.delete_comment(db, comment_id)
    return ok("Comment deleted successfully", {})
