"""
VortexTau Middleware - request processing middleware.

- request_limits: body size limit and per-request logging
"""

from .request_limits import MAX_BODY_SIZE_API, RequestLoggingMiddleware, RequestSizeLimitMiddleware

__all__ = ["MAX_BODY_SIZE_API", "RequestLoggingMiddleware", "RequestSizeLimitMiddleware"]
