"""
Custom exception hierarchy for VortexTau.

All exceptions inherit from VortexError and include:
- code: ErrorCode for categorization
- message: Human-readable error message
- details: Optional additional context
- recoverable: Whether the user can retry/fix the issue
- status_code: HTTP status used when the error crosses the API boundary
- context: Additional key-value pairs for debugging
"""

from typing import Any, Optional
from .codes import ErrorCode


class VortexError(Exception):
    """Base exception for all VortexTau errors.

    Attributes:
        code: The ErrorCode categorizing this error
        message: Human-readable error message
        details: Optional additional context for the user
        recoverable: Whether the error can be resolved by user action
        status_code: HTTP status for API responses
        context: Additional debugging information
    """

    code: ErrorCode = ErrorCode.INTERNAL_UNEXPECTED
    recoverable: bool = False
    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        recoverable: Optional[bool] = None,
        **context: Any,
    ):
        self.message = message
        self.details = details
        self.context = context if context else None

        # Allow overriding class defaults
        if code is not None:
            self.code = code
        if recoverable is not None:
            self.recoverable = recoverable

        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
            "context": self.context,
        }


class ValidationError(VortexError):
    """Bad or oversized input, rejected before any network call."""

    code = ErrorCode.VALIDATION_INVALID_FORMAT
    recoverable = True
    status_code = 400

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        parameter: Optional[str] = None,
        reason: Optional[str] = None,
        **context: Any,
    ):
        if reason == "empty":
            code = ErrorCode.VALIDATION_EMPTY_INPUT
        elif reason == "too_long":
            code = ErrorCode.VALIDATION_INPUT_TOO_LONG
        else:
            code = ErrorCode.VALIDATION_INVALID_FORMAT

        ctx = {**context}
        if parameter:
            ctx["parameter"] = parameter
        super().__init__(message, details, code=code, **ctx)


class ConfigurationError(VortexError):
    """Missing credential or invalid server configuration."""

    code = ErrorCode.CONFIG_MISSING_CREDENTIAL
    recoverable = False
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None, setting: Optional[str] = None, **context: Any):
        ctx = {**context}
        if setting:
            ctx["setting"] = setting
        super().__init__(message, details, **ctx)


class RetrievalError(VortexError):
    """Search provider transport failure or non-success response."""

    code = ErrorCode.RETRIEVAL_NETWORK_ERROR
    recoverable = True
    status_code = 500

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        status: Optional[int] = None,
        error_type: Optional[str] = None,
        **context: Any,
    ):
        if error_type == "status":
            code = ErrorCode.RETRIEVAL_BAD_STATUS
        elif error_type == "response":
            code = ErrorCode.RETRIEVAL_BAD_RESPONSE
        else:
            code = ErrorCode.RETRIEVAL_NETWORK_ERROR

        ctx = {**context}
        if status:
            ctx["status"] = status
        super().__init__(message, details, code=code, **ctx)


class GenerationError(VortexError):
    """Model backend failure before or during a stream."""

    code = ErrorCode.GENERATION_STREAM_FAILED
    recoverable = True
    status_code = 502

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        model: Optional[str] = None,
        error_type: Optional[str] = None,
        **context: Any,
    ):
        if error_type == "unavailable":
            code = ErrorCode.GENERATION_UNAVAILABLE
        elif error_type == "truncated":
            code = ErrorCode.GENERATION_STREAM_TRUNCATED
        else:
            code = ErrorCode.GENERATION_STREAM_FAILED

        ctx = {**context}
        if model:
            ctx["model"] = model
        super().__init__(message, details, code=code, **ctx)


class PersistenceError(VortexError):
    """Storage read or write failure."""

    code = ErrorCode.PERSISTENCE_WRITE_FAILED
    recoverable = True
    status_code = 500

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        operation: Optional[str] = None,
        path: Optional[str] = None,
        **context: Any,
    ):
        code = ErrorCode.PERSISTENCE_READ_FAILED if operation == "read" else ErrorCode.PERSISTENCE_WRITE_FAILED

        ctx = {**context}
        if path:
            ctx["path"] = path
        super().__init__(message, details, code=code, **ctx)


class ParseError(VortexError):
    """Malformed cached, stored or streamed JSON."""

    code = ErrorCode.PARSE_JSON_FAILED
    recoverable = True
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None, source: Optional[str] = None, **context: Any):
        code = ErrorCode.PARSE_STREAM_EVENT if source == "stream" else ErrorCode.PARSE_JSON_FAILED

        ctx = {**context}
        if source:
            ctx["source"] = source
        super().__init__(message, details, code=code, **ctx)


class NotFoundError(VortexError):
    """Error when a requested chat or shared chat does not exist."""

    code = ErrorCode.NOT_FOUND_CHAT
    recoverable = True
    status_code = 404

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        **context: Any,
    ):
        code = ErrorCode.NOT_FOUND_SHARED_CHAT if resource_type == "shared_chat" else ErrorCode.NOT_FOUND_CHAT

        ctx = {**context}
        if resource_type:
            ctx["resource_type"] = resource_type
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message, details, code=code, **ctx)
