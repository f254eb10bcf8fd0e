# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Error classification for backend failures.

Backend SDKs report failures in several shapes: an integer ``status_code``
or ``code`` attribute, a string ``status`` such as ``"RESOURCE_EXHAUSTED"``,
a nested ``response`` object, or nothing but a message. This module folds
all of them into one of four categories that drive the retry policy.
"""

from enum import Enum
from typing import Any

from ..config import ThrottleConfig

# Message fragments (lower-case) identifying credential problems
CREDENTIAL_PATTERNS = (
    "requested entity was not found",
    "api key not found",
    "api key not valid",
    "api_key_invalid",
)

# Message fragments (lower-case) identifying quota violations
QUOTA_PATTERNS = (
    "429",
    "resource_exhausted",
    "quota",
)

_STATUS_ATTRIBUTES = ("status_code", "status", "code")


class ErrorCategory(Enum):
    """
    Failure categories derived from backend response inspection.

    - QUOTA_EXCEEDED: The backend rejected the call for rate/quota reasons.
    - INVALID_CREDENTIAL: The API key is missing, unknown or invalid.
    - TRANSIENT: The backend is temporarily unavailable (503/504).
    - OTHER: Anything else; surfaced unchanged.
    """

    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_CREDENTIAL = "invalid_credential"
    TRANSIENT = "transient"
    OTHER = "other"


def extract_status_code(error: BaseException) -> int | None:
    """
    Find an integer HTTP status code on an error or its response.

    Boolean values and strings are ignored; string statuses are matched as
    message text by :func:`error_text`.
    """
    sources: list[Any] = [error, getattr(error, "response", None)]
    for source in sources:
        if source is None:
            continue
        for attr in _STATUS_ATTRIBUTES:
            value = getattr(source, attr, None)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
    return None


def error_text(error: BaseException) -> str:
    """Lower-cased message of an error, including any string status."""
    parts = [str(getattr(error, "message", "") or ""), str(error)]
    status = getattr(error, "status", None)
    if isinstance(status, str):
        parts.append(status)
    return " ".join(part for part in parts if part).lower()


def classify_error(
    error: BaseException, config: ThrottleConfig | None = None
) -> ErrorCategory:
    """
    Classify a backend failure.

    Credential patterns are checked first, then quota signals, then the
    transient status codes.

    Args:
        error: The exception raised by the unit of work
        config: Throttle configuration holding the status codes

    Returns:
        The ErrorCategory for the failure
    """
    config = config or ThrottleConfig()
    status = extract_status_code(error)
    message = error_text(error)

    if any(pattern in message for pattern in CREDENTIAL_PATTERNS):
        return ErrorCategory.INVALID_CREDENTIAL

    if status == config.quota_status_code or any(
        pattern in message for pattern in QUOTA_PATTERNS
    ):
        return ErrorCategory.QUOTA_EXCEEDED

    if status in config.transient_status_codes:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.OTHER


__all__ = [
    "CREDENTIAL_PATTERNS",
    "QUOTA_PATTERNS",
    "ErrorCategory",
    "classify_error",
    "error_text",
    "extract_status_code",
]
