"""Error taxonomy and the single boundary that renders it.

Services and handlers raise these at the point of detection; the handlers
registered by ``install_error_handlers`` turn every failure into
``{"success": false, "message": ...}`` with the matching status code.
"""
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    status = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(
            status_code=self.status,
            detail=message or self.default_message,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(ApiError):
    status = 400
    default_message = "Invalid request"


class Unauthenticated(ApiError):
    status = 401
    default_message = "Unauthorized access"


class InvalidToken(Unauthenticated):
    default_message = "Unauthorized access - Invalid token"


class TokenExpired(Unauthenticated):
    default_message = "Unauthorized access - Token expired"


class Forbidden(ApiError):
    status = 403
    default_message = "You are not authorized to perform this action"


class NotFound(ApiError):
    status = 404
    default_message = "Resource not found"


class Conflict(ApiError):
    status = 409
    default_message = "Resource already exists"


class PayloadTooLarge(ApiError):
    status = 413
    default_message = "Payload too large"


class Internal(ApiError):
    status = 500


def error_body(message: str) -> dict:
    return {"success": False, "message": message}


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form"))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=error_body(_validation_message(exc)))


async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("Internal server error"))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
