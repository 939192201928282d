import logging
import secrets
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.auth.models import User
from storefront.auth.security import (
    ExpiredSignatureError,
    JWTError,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from storefront.auth.sessions import RefreshTokenStore, UserColumnTokenStore
from storefront.auth.validation import validate_email, validate_password, validate_text
from storefront.core.errors import (
    Conflict,
    Internal,
    NotFound,
    TokenExpired,
    Unauthenticated,
    ValidationError,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def register(db: Session, *, name: str, email: str, password: str) -> User:
    name = validate_text(name, "name")
    email = (email or "").strip().lower()
    validate_email(email)

    if find_user_by_email(db, email):
        raise Conflict("User already exists with this email")

    validate_password(password)
    try:
        pw_hash = hash_password(password)
    except ValueError as e:
        raise ValidationError(str(e))

    user = User(
        id=f"usr_{secrets.token_hex(12)}",
        name=name,
        email=email,
        password_hash=pw_hash,
        refresh_token=None,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration for the same email
        db.rollback()
        raise Conflict("User already exists with this email")
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return user


def issue_tokens(db: Session, user: User, store: RefreshTokenStore | None = None) -> TokenPair:
    """Mint a fresh access/refresh pair and make the refresh token the user's live one."""
    store = store or UserColumnTokenStore(db)
    try:
        access_token = create_access_token({"id": user.id, "name": user.name, "email": user.email})
        refresh_token = create_refresh_token(user.id)
    except JWTError as e:
        raise Internal(f"Failed to generate tokens: {e}")

    store.save(user.id, refresh_token)
    db.commit()
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


def login(
    db: Session,
    *,
    email: str,
    password: str,
    store: RefreshTokenStore | None = None,
) -> TokenPair:
    email = (email or "").strip().lower()
    try:
        validate_email(email)
        validate_password(password)
    except ValidationError:
        logger.warning("Login rejected: malformed credentials")
        raise Unauthenticated(INVALID_CREDENTIALS)

    user = find_user_by_email(db, email)
    password_ok = False
    if user:
        try:
            password_ok = verify_password(password, user.password_hash)
        except ValueError:
            password_ok = False

    if not user or not password_ok:
        logger.warning("Login failed for %s", email)
        raise Unauthenticated(INVALID_CREDENTIALS)

    pair = issue_tokens(db, user, store)
    logger.info("User %s logged in", user.id)
    return pair


def refresh_session(
    db: Session,
    refresh_token: str | None,
    store: RefreshTokenStore | None = None,
) -> TokenPair:
    if not refresh_token:
        raise Unauthenticated("Unauthorized access - No refresh token provided")
    try:
        claims = decode_refresh_token(refresh_token)
    except ExpiredSignatureError:
        raise TokenExpired("Refresh token expired")
    except JWTError:
        raise Unauthenticated("Invalid refresh token")

    user_id = claims.get("id")
    store = store or UserColumnTokenStore(db)
    if not user_id or not store.is_active(user_id, refresh_token):
        raise Unauthenticated("Refresh token is no longer valid")

    user = db.get(User, user_id)
    if not user:
        raise Unauthenticated("User not found")
    return issue_tokens(db, user, store)


def logout(db: Session, user_id: str, store: RefreshTokenStore | None = None) -> None:
    store = store or UserColumnTokenStore(db)
    store.revoke(user_id)
    db.commit()
    logger.info("User %s logged out", user_id)


def delete_account(db: Session, user_id: str) -> None:
    # local import: products imports auth models
    from storefront.products.images import remove_image
    from storefront.products.service import delete_products_owned_by

    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    filenames = delete_products_owned_by(db, user_id)
    db.delete(user)
    db.commit()
    for filename in filenames:
        remove_image(filename)
    logger.info("Deleted user %s", user_id)
