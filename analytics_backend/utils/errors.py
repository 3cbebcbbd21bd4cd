"""
Centralized Error Codes

Provides user-friendly messages and a consistent error payload format for
validation outcomes produced by the period engine. The engine never raises for
malformed user input; it reports an ErrorCode that a presentation layer may
surface.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for consistent responses"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Custom range input
    MISSING_START_DATE = "MISSING_START_DATE"
    MISSING_END_DATE = "MISSING_END_DATE"
    RANGE_OUT_OF_ORDER = "RANGE_OUT_OF_ORDER"

    # Selection state
    UNKNOWN_PRESET = "UNKNOWN_PRESET"
    NOT_EDITING = "NOT_EDITING"
    COMPARISON_RANGE_INCOMPLETE = "COMPARISON_RANGE_INCOMPLETE"


# User-friendly error messages (do not expose internal details)
USER_FRIENDLY_MESSAGES = {
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again later.",
    ErrorCode.VALIDATION_ERROR: "The selected dates are not valid. Please check your selection.",

    ErrorCode.MISSING_START_DATE: "Please choose a start date.",
    ErrorCode.MISSING_END_DATE: "Please choose an end date.",
    ErrorCode.RANGE_OUT_OF_ORDER: "The start date must be on or before the end date.",

    ErrorCode.UNKNOWN_PRESET: "The selected period is not available. Showing the last 30 days instead.",
    ErrorCode.NOT_EDITING: "Open the date range picker before applying a custom range.",
    ErrorCode.COMPARISON_RANGE_INCOMPLETE: "Please choose both comparison dates.",
}


def create_error_response(
    code: ErrorCode,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        code: Error code enum
        message: Optional custom message (defaults to user-friendly message)
        details: Optional additional details

    Returns:
        Standardized error response dict
    """
    return {
        "error": {
            "code": code.value,
            "message": message or USER_FRIENDLY_MESSAGES.get(code, USER_FRIENDLY_MESSAGES[ErrorCode.INTERNAL_ERROR]),
            **({"details": details} if details else {}),
        }
    }


def friendly_message(code: Optional[ErrorCode]) -> Optional[str]:
    """Return the user-facing message for a code, or None when there is no error"""
    if code is None:
        return None
    return USER_FRIENDLY_MESSAGES.get(code, USER_FRIENDLY_MESSAGES[ErrorCode.INTERNAL_ERROR])
