# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the wardrobe throttle library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from ThrottlerError, making it easy to catch
all throttling-related exceptions with a single except clause.
"""


class ThrottlerError(Exception):
    """Base exception for all throttler errors.

    Catch this exception to handle any error originating from the library.
    Errors raised by the backend itself (unclassified failures, transient
    failures that outlived the retry budget) are surfaced unchanged and do
    NOT inherit from this class.

    Example:
        try:
            text = await manager.enqueue(TrafficClass.FLASH, call)
        except ThrottlerError as e:
            logger.error(f"Throttler error: {e}")
    """

    pass


class QuotaExceededError(ThrottlerError):
    """Raised when the backend keeps rejecting calls with a quota violation.

    The manager retries a quota violation once after a long enforced delay.
    If the retry is rejected as well, this exception is raised to the caller.
    Both traffic classes have been pushed into cooldown by the time the
    caller sees it.

    Attributes:
        retry_after: Seconds until the manager will dispatch again.
            May be None if the timing is not known.

    Example:
        try:
            await service.generate_image(prompt)
        except QuotaExceededError as e:
            show_banner("AI quota exceeded, please wait a minute.")
    """

    def __init__(
        self,
        message: str = "API rate limit exceeded. Please wait a moment.",
        retry_after: float | None = None,
    ):
        super().__init__(message)
        self.retry_after = retry_after


class InvalidCredentialError(ThrottlerError):
    """Raised when the backend reports a missing or invalid API key.

    Credential failures are never retried: the user has to select a key
    again before any further call can succeed.

    Example:
        try:
            await service.ask_stylist_deep(question)
        except InvalidCredentialError:
            await credential_host.open_select_key()
    """

    def __init__(self, message: str = "API Key error. Please re-select your key."):
        super().__init__(message)


class GenerationError(ThrottlerError):
    """Raised when the backend answered but returned no usable payload.

    Typical causes are an image generation response without any inline
    image part, or a finished video job without a download URI.
    """

    pass


class SessionClosedError(ThrottlerError):
    """Raised when a stopped live consultation session is used."""

    pass


class ConfigurationError(ThrottlerError, ValueError):
    """Raised when configuration is invalid.

    Common causes include non-positive cooldown windows, a retry budget
    below one attempt, or an unknown traffic class. It is also a
    ValueError, so callers validating input can catch either.
    """

    pass
