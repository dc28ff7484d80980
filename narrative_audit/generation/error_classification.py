"""Classifies model service failures into retryable and fatal kinds."""

from enum import Enum

from narrative_audit.generation.exceptions import GenerationServiceError

RATE_LIMIT_STATUS = 429
OVERLOAD_STATUSES = frozenset({503, 529})
AUTH_STATUSES = frozenset({401, 403})
INVALID_REQUEST_STATUS = 400
NETWORK_CODES = frozenset({"connection_error", "timeout", "ECONNRESET", "ETIMEDOUT"})


class ErrorKind(str, Enum):
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    OVERLOAD = "overload"
    INVALID_REQUEST = "invalid_request"
    NETWORK = "network"
    UNKNOWN = "unknown"


_RETRYABLE_KINDS = frozenset({ErrorKind.RATE_LIMIT, ErrorKind.OVERLOAD, ErrorKind.NETWORK})


def classify(error: Exception) -> ErrorKind:
    if not isinstance(error, GenerationServiceError):
        return ErrorKind.UNKNOWN
    status = error.status_code
    if status in AUTH_STATUSES:
        return ErrorKind.AUTH
    if status == RATE_LIMIT_STATUS:
        return ErrorKind.RATE_LIMIT
    if status in OVERLOAD_STATUSES:
        return ErrorKind.OVERLOAD
    if status == INVALID_REQUEST_STATUS:
        return ErrorKind.INVALID_REQUEST
    if status is None and error.code in NETWORK_CODES:
        return ErrorKind.NETWORK
    return ErrorKind.UNKNOWN


def is_retryable(error: Exception) -> bool:
    return classify(error) in _RETRYABLE_KINDS


def describe(error: Exception) -> str:
    """Short human-readable message, safe to show to the buyer."""
    kind = classify(error)
    if kind is ErrorKind.AUTH:
        return "Authentication failed - invalid API key"
    if kind is ErrorKind.RATE_LIMIT:
        return "Rate limit exceeded - too many requests"
    if kind is ErrorKind.OVERLOAD:
        return "API overloaded - service temporarily unavailable"
    if kind is ErrorKind.INVALID_REQUEST:
        return f"Invalid request: {_message_of(error)}"
    return _message_of(error) or "Unknown error occurred"


def error_code(error: Exception) -> str:
    """Raw status or provider code for diagnostics."""
    if isinstance(error, GenerationServiceError):
        if error.status_code is not None:
            return str(error.status_code)
        if error.code:
            return error.code
    return "UNKNOWN"


def _message_of(error: Exception) -> str:
    if isinstance(error, GenerationServiceError):
        return error.message
    return str(error)
