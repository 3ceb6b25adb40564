"""Error types and classification for remote store failures."""

from enum import Enum
from typing import Literal


class RemoteStoreError(RuntimeError):
    """Raised when the spreadsheet backend fails or reports an error payload."""


class RecordNotFoundError(KeyError):
    """Raised when a record id is absent from the expected local collection."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Record not found"


class ErrorCategory(Enum):
    """Categories of errors that can occur around a mutation."""

    NOT_FOUND = "not_found"
    REMOTE_FAILURE = "remote_failure"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


_ERROR_PATTERNS: dict[
    Literal["not_found", "network"],
    dict[str, list[str] | set[str]],
] = {
    "not_found": {
        "phrases": [
            "not found",
            "id not found",
            "sheet missing",
        ],
        "exception_types": {"RecordNotFoundError", "KeyError"},
    },
    "network": {
        "phrases": [
            "connection",
            "timeout",
            "timed out",
            "network",
            "503",
            "502",
            "504",
            "unreachable",
        ],
        "exception_types": {"ConnectionError", "TimeoutError", "ConnectError", "ReadTimeout", "ConnectTimeout"},
    },
}


def _match_error_pattern(
    *,
    error_str: str,
    exception_type: str,
    pattern_type: Literal["not_found", "network"],
) -> bool:
    """Return True if the error matches the configured pattern type."""
    patterns = _ERROR_PATTERNS[pattern_type]
    return any(phrase in error_str for phrase in patterns["phrases"]) or exception_type in patterns["exception_types"]


def error_message(exception: BaseException) -> str:
    """Return the message shown to the user for a failed remote call."""
    message = str(exception).strip()
    return message or "Unknown error"


def classify_remote_error(exception: BaseException) -> tuple[ErrorCategory, str]:
    """Classify a remote store failure and return a user-friendly message.

    Args:
        exception: The exception raised by the remote store call

    Returns:
        Tuple of (ErrorCategory, user_friendly_message)
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="network"):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Network error occurred. Please check your connection and try again.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="not_found"):
        return (
            ErrorCategory.NOT_FOUND,
            "The record was not found in the spreadsheet.",
        )

    if isinstance(exception, RemoteStoreError):
        return (
            ErrorCategory.REMOTE_FAILURE,
            "The spreadsheet backend rejected the request.",
        )

    return (
        ErrorCategory.UNKNOWN,
        "An unexpected error occurred. Please try again later.",
    )
