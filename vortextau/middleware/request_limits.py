"""
Request middleware: body size limit and access logging.

Bodies are checked by Content-Length only; a chunked body without the header
is passed through.
"""

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from ..errors import ValidationError, error_response
from ..logging_config import log_request

logger = logging.getLogger(__name__)

MAX_BODY_SIZE_API = 1 * 1024 * 1024  # 1MB


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests with bodies exceeding the size limit."""

    def __init__(self, app, max_body_size: int = MAX_BODY_SIZE_API):
        super().__init__(app)
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                size = int(content_length)
            except ValueError:
                error = ValidationError("Invalid Content-Length header", parameter="content-length")
                return JSONResponse(status_code=400, content=error_response(error))
            if size > self.max_body_size:
                logger.warning(f"Rejected {request.method} {request.url.path}: body {size} bytes")
                error = ValidationError(
                    f"Request body too large ({size} bytes, limit {self.max_body_size} bytes)",
                    parameter="body",
                    reason="too_long",
                )
                return JSONResponse(status_code=413, content=error_response(error))
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method and path of every request."""

    async def dispatch(self, request: Request, call_next):
        log_request(logger, request.method, request.url.path)
        return await call_next(request)
