from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    # bcrypt hard limit = 72 bytes
    password: str = Field(min_length=1, max_length=72)


class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    # prevent bcrypt crash on long input
    password: str = Field(max_length=72)


class RefreshRequest(BaseModel):
    refresh_token: str | None = Field(default=None, min_length=20)


class AuthUser(BaseModel):
    """What protected handlers see about the caller."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str


class UserOut(AuthUser):
    created_at: datetime
