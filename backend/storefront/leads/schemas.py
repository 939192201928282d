from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from storefront.comments.schemas import CommentOut


class LeadCreate(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=64)
    message: str | None = Field(default=None, max_length=10_000)


class LeadUpdate(LeadCreate):
    type: str | None = Field(default=None, min_length=1, max_length=32)


class LeadOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str | None = None
    message: str
    type: str
    slug: str
    comments: list[CommentOut] = []
    created_at: datetime
    updated_at: datetime


class LeadPage(BaseModel):
    leads: list[LeadOut]
    total: int
    total_pages: int
    current_page: int


class RecentLead(BaseModel):
    name: str
    phone: str | None = None
    email: str
    comments_count: int
