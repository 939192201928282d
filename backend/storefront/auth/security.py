import secrets
from datetime import datetime, timedelta
from typing import Any, Dict

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from storefront.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

ENV = settings.ENV
ACCESS_SECRET = settings.ACCESS_JWT_SECRET
REFRESH_SECRET = settings.REFRESH_TOKEN_SECRET
if (not ACCESS_SECRET or not REFRESH_SECRET) and ENV != "dev":
    raise RuntimeError("ACCESS_JWT_SECRET and REFRESH_TOKEN_SECRET must be set")
if not ACCESS_SECRET:
    ACCESS_SECRET = "dev-access-change-me"
if not REFRESH_SECRET:
    REFRESH_SECRET = "dev-refresh-change-me"
if ACCESS_SECRET == REFRESH_SECRET:
    raise RuntimeError("Access and refresh tokens must be signed with different secrets")

JWT_ALG = "HS256"


def _ensure_bcrypt_limit(password: str) -> None:
    # bcrypt limit is 72 BYTES, not characters
    if len(password.encode("utf-8")) > 72:
        raise ValueError("Password too long (max 72 bytes).")


def hash_password(password: str) -> str:
    _ensure_bcrypt_limit(password)
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    _ensure_bcrypt_limit(password)
    return pwd_context.verify(password, password_hash)


def create_access_token(user: Dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Short-lived token carrying the user's id, name and email."""
    to_encode = {"id": user["id"], "name": user["name"], "email": user["email"]}
    to_encode["exp"] = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXP_MINUTES)
    )
    return jwt.encode(to_encode, ACCESS_SECRET, algorithm=JWT_ALG)


def create_refresh_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    to_encode = {
        "id": user_id,
        "jti": secrets.token_urlsafe(24),
        "exp": datetime.utcnow() + (
            expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXP_DAYS)
        ),
    }
    return jwt.encode(to_encode, REFRESH_SECRET, algorithm=JWT_ALG)


def decode_access_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, ACCESS_SECRET, algorithms=[JWT_ALG])


def decode_refresh_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, REFRESH_SECRET, algorithms=[JWT_ALG])


__all__ = [
    "ExpiredSignatureError",
    "JWTError",
    "create_access_token",
    "create_refresh_token",
    "decode_access_token",
    "decode_refresh_token",
    "hash_password",
    "verify_password",
]
