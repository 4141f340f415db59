"""
Centralized error response builder for DayRhythm.

Error codes are constants mapped to default message strings. The builder
returns structured error dicts compatible with the API response envelope.
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Error Code Constants
# =============================================================================

NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
CONFLICT = "CONFLICT"
INTERNAL_ERROR = "INTERNAL_ERROR"

_ERROR_MESSAGES: dict[str, str] = {
    NOT_FOUND: "The requested resource was not found.",
    VALIDATION_ERROR: "Invalid input. Please check your request.",
    CONFLICT: "The request conflicts with the current state.",
    INTERNAL_ERROR: "An unexpected error occurred.",
}


def get_error_message(code: str) -> str:
    """Default message for an error code (generic for unknown codes)."""
    return _ERROR_MESSAGES.get(code, "An error occurred.")


def build_error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build a structured error dict.

    Args:
        code: Error code constant (e.g. NOT_FOUND, VALIDATION_ERROR)
        message: Optional override message
        details: Optional additional error details

    Returns:
        {"code": str, "message": str} plus "details" when given
    """
    error: dict[str, Any] = {
        "code": code,
        "message": message if message is not None else get_error_message(code),
    }
    if details is not None:
        error["details"] = details
    return error


__all__ = [
    "CONFLICT",
    "INTERNAL_ERROR",
    "NOT_FOUND",
    "VALIDATION_ERROR",
    "build_error_response",
    "get_error_message",
]
