from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from storefront.auth import service
from storefront.auth.deps import ACCESS_COOKIE, REFRESH_COOKIE, get_current_user
from storefront.auth.models import User
from storefront.auth.schemas import (
    AuthUser,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserOut,
)
from storefront.core.config import settings
from storefront.core.errors import NotFound
from storefront.core.responses import ApiResponse, ok
from storefront.db.session import get_db

router = APIRouter()


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "lax",
    }


def _set_auth_cookies(response: Response, pair: service.TokenPair) -> None:
    # both cookies share one absolute expiry, whatever the token lifetimes are
    expires = datetime.now(timezone.utc) + timedelta(days=settings.COOKIE_EXPIRE_DAYS)
    response.set_cookie(REFRESH_COOKIE, pair.refresh_token, expires=expires, **_cookie_options())
    response.set_cookie(ACCESS_COOKIE, pair.access_token, expires=expires, **_cookie_options())


def _clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, **_cookie_options())
    response.delete_cookie(REFRESH_COOKIE, **_cookie_options())


@router.post("/register", status_code=201, response_model=ApiResponse[UserOut])
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = service.register(db, name=payload.name, email=payload.email, password=payload.password)
    return ok("User registered successfully", UserOut.model_validate(user))


@router.post("/login", response_model=ApiResponse[str])
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    pair = service.login(db, email=payload.email, password=payload.password)
    _set_auth_cookies(response, pair)
    return ok("Login successful", pair.access_token)


@router.post("/refresh-token", response_model=ApiResponse[str])
def refresh_token(
    request: Request,
    response: Response,
    payload: RefreshRequest | None = None,
    db: Session = Depends(get_db),
):
    token = request.cookies.get(REFRESH_COOKIE) or (payload.refresh_token if payload else None)
    pair = service.refresh_session(db, token)
    _set_auth_cookies(response, pair)
    return ok("Access token refreshed", pair.access_token)


@router.post("/logout", response_model=ApiResponse[dict])
def logout(
    response: Response,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    service.logout(db, current_user.id)
    _clear_auth_cookies(response)
    return ok("User logged out successfully", {})


@router.get("/get-user", response_model=ApiResponse[AuthUser])
def get_user(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    user = db.get(User, current_user.id)
    if not user:
        raise NotFound("User not found")
    return ok("User details fetched successfully", AuthUser.model_validate(user))


@router.get("/check-auth", response_model=ApiResponse[dict])
def check_auth(current_user: AuthUser = Depends(get_current_user)):
    return ok("Authenticated user!", {"user": current_user.model_dump()})


@router.delete("", response_model=ApiResponse[dict])
def delete_user(
    response: Response,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    service.delete_account(db, current_user.id)
    _clear_auth_cookies(response)
    return ok("User deleted successfully", {})
