import math

from fastapi import Query
from pydantic import BaseModel


class PageParams(BaseModel):
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(default=1, ge=1, le=100_000),
    limit: int = Query(default=10, ge=1, le=100),
) -> PageParams:
    return PageParams(page=page, limit=limit)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
