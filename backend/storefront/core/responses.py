from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


def ok(message: str, data: Any = None) -> dict:
    return {"success": True, "message": message, "data": data}
