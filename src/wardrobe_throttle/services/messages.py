# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Mapping of classified failures to user-facing messages."""

from dataclasses import dataclass
from enum import Enum

from ..exceptions import InvalidCredentialError, QuotaExceededError
from ..protocols.credentials import CredentialHostProtocol
from .credentials import reselect_credential


class UserAction(Enum):
    """What the interface should offer after a failure."""

    WAIT = "wait"
    RESELECT_KEY = "reselect_key"
    RETRY = "retry"


@dataclass(frozen=True)
class UserMessage:
    text: str
    action: UserAction


QUOTA_MESSAGE = "AI Quota Exceeded. Please wait a minute before trying again."
CREDENTIAL_MESSAGE = "API Key Issue. Please re-select your Pro key."
GENERIC_MESSAGE = "The Style Lab is momentarily busy. Please try again."


def user_message_for(error: BaseException) -> UserMessage:
    """Message and suggested action for a failed stylist request."""
    if isinstance(error, QuotaExceededError):
        return UserMessage(QUOTA_MESSAGE, UserAction.WAIT)
    if isinstance(error, InvalidCredentialError):
        return UserMessage(CREDENTIAL_MESSAGE, UserAction.RESELECT_KEY)
    return UserMessage(GENERIC_MESSAGE, UserAction.RETRY)


async def respond_to_failure(
    error: BaseException, host: CredentialHostProtocol | None = None
) -> UserMessage:
    """
    Message for a failed request, prompting for a new key when needed.

    When the key was rejected and a host is given, the key selection dialog
    is opened before the message is returned.
    """
    message = user_message_for(error)
    if message.action is UserAction.RESELECT_KEY and host is not None:
        await reselect_credential(host)
    return message


__all__ = [
    "CREDENTIAL_MESSAGE",
    "GENERIC_MESSAGE",
    "QUOTA_MESSAGE",
    "UserAction",
    "UserMessage",
    "respond_to_failure",
    "user_message_for",
]
