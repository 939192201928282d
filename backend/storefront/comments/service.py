import secrets

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.auth.validation import validate_text
from storefront.comments.models import Comment
from storefront.core.errors import NotFound, ValidationError
from storefront.leads.models import Lead


def get_comment_or_404(db: Session, comment_id: str) -> Comment:
    comment = db.get(Comment, comment_id)
    if not comment:
        raise NotFound("Comment not found")
    return comment


def create_comment(db: Session, *, message: str | None, lead_id: str | None) -> Comment:
    if not message or not message.strip() or not lead_id:
        raise ValidationError("Message and lead_id are required")
    if not db.get(Lead, lead_id):
        raise NotFound("Lead not found")

    comment = Comment(
        id=f"cmt_{secrets.token_hex(12)}",
        message=message.strip(),
        lead_id=lead_id,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def list_comments(db: Session, lead_id: str, *, offset: int, limit: int) -> tuple[list[Comment], int]:
    rows = db.execute(
        select(Comment)
        .where(Comment.lead_id == lead_id)
        .order_by(Comment.created_at)
        .offset(offset)
        .limit(limit)
    ).scalars().all()
    total = db.execute(
        select(func.count(Comment.id)).where(Comment.lead_id == lead_id)
    ).scalar() or 0
    return list(rows), int(total)


def update_comment(db: Session, comment_id: str, message: str | None) -> Comment:
    if not message or not message.strip():
        raise ValidationError("Message is required")
    comment = get_comment_or_404(db, comment_id)
    comment.message = validate_text(message, "message")
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, comment_id: str) -> None:
    comment = get_comment_or_404(db, comment_id)
    db.delete(comment)
    db.commit()
