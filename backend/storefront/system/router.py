from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.core.errors import ApiError
from storefront.db.session import get_db

router = APIRouter()


class ServiceUnavailable(ApiError):
    status = 503
    default_message = "Database not ready"


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/ready")
def readiness(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        raise ServiceUnavailable()
    return {"status": "ready"}
