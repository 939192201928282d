import logging
import secrets

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.auth.validation import validate_text
from storefront.comments.models import Comment
from storefront.core.config import settings
from storefront.core.errors import Conflict, NotFound, ValidationError
from storefront.core.slug import make_slug, unique_slug
from storefront.leads.models import Lead

logger = logging.getLogger(__name__)

RECENT_LEADS = 5


def slug_exists(db: Session, slug: str) -> bool:
    return db.execute(select(Lead.id).where(Lead.slug == slug)).first() is not None


def _lead_slug(db: Session, name: str, current_slug: str | None = None) -> str:
    if not make_slug(name):
        raise ValidationError("Name must contain at least one letter or digit")
    return unique_slug(
        None,
        name,
        lambda s: s != current_slug and slug_exists(db, s),
        max_attempts=settings.SLUG_MAX_ATTEMPTS,
    )


def get_lead_or_404(db: Session, slug: str) -> Lead:
    lead = db.execute(select(Lead).where(Lead.slug == slug)).scalar_one_or_none()
    if not lead:
        raise NotFound("Lead not found")
    return lead


def create_lead(
    db: Session,
    *,
    name: str | None,
    email: str | None,
    message: str | None,
    phone: str | None = None,
) -> Lead:
    name = validate_text(name, "name")
    email = validate_text(email, "email")
    message = validate_text(message, "message")

    lead = Lead(
        id=f"lead_{secrets.token_hex(12)}",
        name=name,
        email=email,
        phone=phone.strip() if phone and phone.strip() else None,
        message=message,
        slug=_lead_slug(db, name),
    )
    db.add(lead)
    try:
        db.commit()
    except IntegrityError:
        # slug taken between the lookup and the insert; try once more
        db.rollback()
        lead.slug = _lead_slug(db, name)
        db.add(lead)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise Conflict("A lead with this slug already exists")
    db.refresh(lead)
    logger.info("Lead %s created", lead.slug)
    return lead


def list_leads(db: Session, *, offset: int, limit: int) -> tuple[list[Lead], int]:
    rows = db.execute(
        select(Lead).order_by(Lead.created_at.desc()).offset(offset).limit(limit)
    ).scalars().all()
    return list(rows), count_leads(db)


def update_lead(
    db: Session,
    slug: str,
    *,
    name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
    message: str | None = None,
    lead_type: str | None = None,
) -> Lead:
    lead = get_lead_or_404(db, slug)

    if name and name.strip() != lead.name:
        lead.name = validate_text(name, "name")
        lead.slug = _lead_slug(db, lead.name, current_slug=lead.slug)
    if email:
        lead.email = validate_text(email, "email")
    if phone and phone.strip():
        lead.phone = phone.strip()
    if message:
        lead.message = validate_text(message, "message")
    if lead_type:
        lead.type = lead_type.strip()

    db.add(lead)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("A lead with this slug already exists")
    db.refresh(lead)
    return lead


def delete_lead(db: Session, slug: str) -> None:
    lead = get_lead_or_404(db, slug)
    # comments go with it (delete-orphan cascade)
    db.delete(lead)
    db.commit()


def search_leads(db: Session, q: str | None) -> list[Lead]:
    if not q or not q.strip():
        raise ValidationError("Please provide a search query")
    pattern = f"%{q.strip()}%"
    stmt = select(Lead).where(
        or_(
            Lead.name.ilike(pattern),
            Lead.email.ilike(pattern),
            Lead.phone.ilike(pattern),
            Lead.message.ilike(pattern),
            Lead.slug.ilike(pattern),
        )
    )
    return list(db.execute(stmt.order_by(Lead.created_at.desc())).scalars().all())


def recent_leads(db: Session, limit: int = RECENT_LEADS) -> list[dict]:
    comment_counts = (
        select(Comment.lead_id, func.count(Comment.id).label("n"))
        .group_by(Comment.lead_id)
        .subquery()
    )
    rows = db.execute(
        select(Lead.name, Lead.phone, Lead.email, func.coalesce(comment_counts.c.n, 0))
        .outerjoin(comment_counts, comment_counts.c.lead_id == Lead.id)
        .order_by(Lead.created_at.desc())
        .limit(limit)
    ).all()
    return [
        {"name": name, "phone": phone, "email": email, "comments_count": int(n)}
        for name, phone, email, n in rows
    ]


def count_leads(db: Session) -> int:
    return int(db.execute(select(func.count(Lead.id))).scalar() or 0)


def lead_creation_dates(db: Session) -> list:
    rows = db.execute(select(Lead.created_at).order_by(Lead.created_at)).scalars().all()
    return [row.date() for row in rows]
