"""
Error types and fixed fallback messages.

Engine functions never raise for data problems; these exceptions live at the
narrative collaborator boundary and are caught there.
"""
from typing import Dict


# Error codes
class ErrorCodes:
    NARRATOR_UNAVAILABLE = "NARRATOR_UNAVAILABLE"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    UNANSWERABLE_QUESTION = "UNANSWERABLE_QUESTION"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class SheetStatsError(Exception):
    """Base class for package errors."""
    error_code = ErrorCodes.UNKNOWN_ERROR


class NarratorError(SheetStatsError):
    """The narrative collaborator could not produce a usable answer."""


class NarratorUnavailableError(NarratorError):
    """No LLM provider is configured or every provider call failed."""
    error_code = ErrorCodes.NARRATOR_UNAVAILABLE


class MalformedNarratorResponseError(NarratorError):
    """The provider answered, but not in the agreed shape."""
    error_code = ErrorCodes.MALFORMED_RESPONSE


# Deterministic text substituted when the collaborator cannot answer
FALLBACK_MESSAGES: Dict[str, str] = {
    ErrorCodes.NARRATOR_UNAVAILABLE: "Automated analysis generated from full-data aggregates.",
    ErrorCodes.MALFORMED_RESPONSE: "Automated analysis generated from full-data aggregates.",
    ErrorCodes.UNANSWERABLE_QUESTION: (
        "I can only answer from aggregates computed over the full dataset. "
        "Please ask about totals, averages, top categories, or trends that exist in the current fields."
    ),
    ErrorCodes.UNKNOWN_ERROR: "Automated analysis generated from full-data aggregates.",
}


def get_fallback_message(error_code: str) -> str:
    """Return the fixed fallback text for an error code."""
    return FALLBACK_MESSAGES.get(error_code, FALLBACK_MESSAGES[ErrorCodes.UNKNOWN_ERROR])
