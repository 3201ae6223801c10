"""
Error handling utilities for VortexTau.

Provides consistent error logging and the FastAPI exception handler that
turns VortexError into JSON responses.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .exceptions import VortexError
from .response import error_response

logger = logging.getLogger(__name__)


def log_error(
    logger: logging.Logger, error: Exception, context: Optional[str] = None, include_traceback: bool = True
) -> None:
    """Log an error with consistent formatting.

    Args:
        logger: Logger instance to use
        error: The exception to log
        context: Optional context string to prefix the message
        include_traceback: Whether to include the full stack trace

    Example:
        >>> log_error(logger, err, context="search")
        # Logs: "[search] RETRIEVAL_BAD_STATUS: Search provider returned 502"
    """
    if isinstance(error, VortexError):
        message = f"{error.code.value}: {error.message}"
    else:
        message = str(error)

    if context:
        message = f"[{context}] {message}"

    logger.error(message, exc_info=include_traceback)


async def _vortex_error_handler(request: Request, exc: VortexError) -> JSONResponse:
    log_error(logger, exc, context=f"{request.method} {request.url.path}", include_traceback=exc.status_code >= 500)
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


def install_exception_handlers(app: FastAPI) -> None:
    """Register VortexError handling on a FastAPI app."""
    app.add_exception_handler(VortexError, _vortex_error_handler)
