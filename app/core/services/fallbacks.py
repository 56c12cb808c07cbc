"""
Purpose: Turn a failed exchange into something the user can read.

classify_failure() prefers a structured backend error code; without one it
falls back to substring search on the error text ("API key", "network").
The substring path is a heuristic kept for backends that only send prose.
"""

from __future__ import annotations
from typing import Optional

from ..models import FailureKind, Notification

CONFIGURATION_FALLBACK = (
    "I'm sorry, there's an issue with the API configuration. Please contact support."
)
CONNECTIVITY_FALLBACK = (
    "I'm having trouble connecting to the network. "
    "Please check your internet connection."
)
GENERIC_FALLBACK = (
    "I'm sorry, I'm having trouble connecting to the server. Please try again later."
)

FALLBACK_TEXT = {
    FailureKind.CONFIGURATION: CONFIGURATION_FALLBACK,
    FailureKind.CONNECTIVITY: CONNECTIVITY_FALLBACK,
    FailureKind.GENERIC: GENERIC_FALLBACK,
}

ERROR_CODES = {
    "config": FailureKind.CONFIGURATION,
    "api_key": FailureKind.CONFIGURATION,
    "network": FailureKind.CONNECTIVITY,
}

SEND_FAILED = Notification(
    title="Error",
    description="Failed to send message. Please try again.",
    variant="destructive",
)
INIT_FAILED = Notification(
    title="Error",
    description="Failed to initialize chat. Please try again.",
    variant="destructive",
)


def classify_failure(error: Optional[BaseException]) -> FailureKind:
    code = getattr(error, "code", None)
    if isinstance(code, str) and code.lower() in ERROR_CODES:
        return ERROR_CODES[code.lower()]

    text = str(error) if error is not None else ""
    if "API key" in text:
        return FailureKind.CONFIGURATION
    if "network" in text:
        return FailureKind.CONNECTIVITY
    return FailureKind.GENERIC


def fallback_message(error: Optional[BaseException]) -> str:
    return FALLBACK_TEXT[classify_failure(error)]
