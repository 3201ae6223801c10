"""
Error codes for VortexTau.

Provides a standardized taxonomy of error codes organized by category.
Use these codes consistently across all error responses.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for VortexTau.

    Categories:
    - VALIDATION_*: Input validation errors (never reach the network)
    - CONFIG_*: Missing or invalid server configuration
    - RETRIEVAL_*: Web search errors
    - GENERATION_*: Language model streaming errors
    - PERSISTENCE_*: Storage read/write errors
    - PARSE_*: Malformed stored or streamed data
    - NOT_FOUND_*: Resource not found errors
    - INTERNAL_*: Internal/unexpected errors
    """

    # Validation errors (input checking)
    VALIDATION_EMPTY_INPUT = "VALIDATION_EMPTY_INPUT"
    VALIDATION_INPUT_TOO_LONG = "VALIDATION_INPUT_TOO_LONG"
    VALIDATION_INVALID_FORMAT = "VALIDATION_INVALID_FORMAT"

    # Configuration errors
    CONFIG_MISSING_CREDENTIAL = "CONFIG_MISSING_CREDENTIAL"
    CONFIG_INVALID_VALUE = "CONFIG_INVALID_VALUE"

    # Retrieval errors (search provider)
    RETRIEVAL_NETWORK_ERROR = "RETRIEVAL_NETWORK_ERROR"
    RETRIEVAL_BAD_STATUS = "RETRIEVAL_BAD_STATUS"
    RETRIEVAL_BAD_RESPONSE = "RETRIEVAL_BAD_RESPONSE"

    # Generation errors (model backend)
    GENERATION_UNAVAILABLE = "GENERATION_UNAVAILABLE"
    GENERATION_STREAM_FAILED = "GENERATION_STREAM_FAILED"
    GENERATION_STREAM_TRUNCATED = "GENERATION_STREAM_TRUNCATED"

    # Persistence errors
    PERSISTENCE_READ_FAILED = "PERSISTENCE_READ_FAILED"
    PERSISTENCE_WRITE_FAILED = "PERSISTENCE_WRITE_FAILED"

    # Parse errors
    PARSE_JSON_FAILED = "PARSE_JSON_FAILED"
    PARSE_STREAM_EVENT = "PARSE_STREAM_EVENT"

    # Not found errors
    NOT_FOUND_CHAT = "NOT_FOUND_CHAT"
    NOT_FOUND_SHARED_CHAT = "NOT_FOUND_SHARED_CHAT"

    # Internal errors
    INTERNAL_UNEXPECTED = "INTERNAL_UNEXPECTED"
