import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.auth.models import User
from storefront.auth.schemas import AuthUser
from storefront.auth.security import ExpiredSignatureError, JWTError, decode_access_token
from storefront.core.errors import InvalidToken, TokenExpired, Unauthenticated
from storefront.db.session import get_db

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"
ACCESS_QUERY_PARAM = "accessToken"


def extract_access_token(request: Request) -> str | None:
    """Cookie first, then ``Authorization: Bearer``, then the query string."""
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header.split(" ", 1)[1].strip()
    if not token:
        token = request.query_params.get(ACCESS_QUERY_PARAM)
    return token or None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> AuthUser:
    token = extract_access_token(request)
    if not token:
        raise Unauthenticated("Unauthorized access - No token provided")

    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise InvalidToken()

    user_id = payload.get("id")
    if not user_id:
        raise InvalidToken()

    user = db.get(User, user_id)
    if not user:
        raise Unauthenticated("Unauthorized access - Invalid token or user not found")

    current = AuthUser(id=user.id, name=user.name, email=user.email)
    request.state.user = current
    return current
