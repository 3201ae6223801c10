"""
VortexTau Error Handling Module

Provides standardized error codes, exceptions, and response builders
for consistent error handling across the server and the client.

Usage:
    from vortextau.errors import (
        # Error codes
        ErrorCode,

        # Exceptions
        VortexError,
        ValidationError,
        ConfigurationError,
        RetrievalError,
        GenerationError,
        PersistenceError,
        ParseError,
        NotFoundError,

        # Response builders
        error_response,
        success_response,

        # Handlers
        install_exception_handlers,
        log_error,
    )

Policy:
    ValidationError blocks locally and never reaches the network layer.
    RetrievalError and classifier failures degrade silently to plain generation.
    GenerationError aborts the turn with one user-visible notice.
    PersistenceError and ParseError are logged and degrade to in-memory state.
    Nothing is retried automatically.
"""

from .codes import ErrorCode
from .exceptions import (
    VortexError,
    ValidationError,
    ConfigurationError,
    RetrievalError,
    GenerationError,
    PersistenceError,
    ParseError,
    NotFoundError,
)
from .response import (
    error_response,
    success_response,
)
from .handlers import (
    install_exception_handlers,
    log_error,
)

__all__ = [
    # Error codes
    "ErrorCode",
    # Exceptions
    "VortexError",
    "ValidationError",
    "ConfigurationError",
    "RetrievalError",
    "GenerationError",
    "PersistenceError",
    "ParseError",
    "NotFoundError",
    # Response builders
    "error_response",
    "success_response",
    # Handlers
    "install_exception_handlers",
    "log_error",
]
