import asyncio
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from storefront.core.errors import error_body

logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware(BaseHTTPMiddleware):
    """
    Answer 504 when a request runs longer than ``timeout`` seconds.

    Only the response is abandoned. A sync handler already running in the
    threadpool keeps going and may still commit its session.
    """

    def __init__(self, app, timeout: float):
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Request timed out after %ss: %s %s",
                self.timeout,
                request.method,
                request.url.path,
            )
            return JSONResponse(status_code=504, content=error_body("Request timed out"))
