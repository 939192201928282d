"""Refresh-token persistence.

One live refresh token per user, kept on the user row. Callers only talk to
``RefreshTokenStore`` so a multi-session table can replace the column later.
"""
import hmac
from typing import Protocol

from sqlalchemy.orm import Session

from storefront.auth.models import User
from storefront.core.errors import NotFound


class RefreshTokenStore(Protocol):
    def save(self, user_id: str, token: str) -> None: ...

    def revoke(self, user_id: str) -> None: ...

    def is_active(self, user_id: str, token: str) -> bool: ...


class UserColumnTokenStore:
    def __init__(self, db: Session):
        self.db = db

    def _user(self, user_id: str) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def save(self, user_id: str, token: str) -> None:
        user = self._user(user_id)
        user.refresh_token = token
        self.db.add(user)

    def revoke(self, user_id: str) -> None:
        user = self._user(user_id)
        user.refresh_token = None
        self.db.add(user)

    def is_active(self, user_id: str, token: str) -> bool:
        user = self.db.get(User, user_id)
        if not user or not user.refresh_token:
            return False
        return hmac.compare_digest(user.refresh_token, token)
