from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    message: str | None = Field(default=None, max_length=10_000)
    lead_id: str | None = Field(default=None, max_length=64)


class CommentUpdate(BaseModel):
    message: str | None = Field(default=None, max_length=10_000)


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    message: str
    lead_id: str
    created_at: datetime
    updated_at: datetime


class CommentPage(BaseModel):
    comments: list[CommentOut]
    total: int
    total_pages: int
    current_page: int
