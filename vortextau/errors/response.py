"""
Standard error response builders for VortexTau.

The HTTP surface keeps the original flat `{"error": "..."}` shape that
browser clients read, with the structured code alongside it.
"""

from typing import Any, Optional
from .codes import ErrorCode
from .exceptions import VortexError


def error_response(error: VortexError | Exception, message: Optional[str] = None) -> dict:
    """Build a standard error response dictionary.

    Args:
        error: The exception to convert to a response
        message: Optional user-facing message replacing the exception text

    Returns:
        Error response dict

    Example:
        >>> from vortextau.errors import ConfigurationError, error_response
        >>> error_response(ConfigurationError("SERP API key not configured"))
        {
            "error": "SERP API key not configured",
            "code": "CONFIG_MISSING_CREDENTIAL",
            "recoverable": False,
        }
    """
    if isinstance(error, VortexError):
        return {
            "error": message or error.message,
            "code": error.code.value,
            "recoverable": error.recoverable,
        }

    # Fallback for foreign exceptions: never leak the cause
    return {
        "error": message or "Internal server error",
        "code": ErrorCode.INTERNAL_UNEXPECTED.value,
        "recoverable": False,
    }


def success_response(data: Optional[dict] = None, **kwargs: Any) -> dict:
    """Build a success response dictionary.

    Example:
        >>> success_response(shareId="abc")
        {"shareId": "abc"}
    """
    response = {}

    if data:
        response.update(data)
    if kwargs:
        response.update(kwargs)

    return response
