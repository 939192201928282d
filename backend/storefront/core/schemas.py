from datetime import date

from pydantic import BaseModel


class CountWithDates(BaseModel):
    """Dashboard chart feed: a row count plus the creation date of every row."""

    count: int
    creation_dates: list[date]
