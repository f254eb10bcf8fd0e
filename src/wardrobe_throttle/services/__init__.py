# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Application-facing services built on the request manager.

This module provides:
- StylistService: All AI features of the wardrobe application
- poll_until_done: Fixed-interval polling of long-running jobs
- ensure_credential, reselect_credential: Key selection through the host
- user_message_for, respond_to_failure: User-facing message for a failed request
"""

from .credentials import ensure_credential, reselect_credential
from .messages import UserAction, UserMessage, respond_to_failure, user_message_for
from .polling import poll_until_done
from .stylist import StylistService

__all__ = [
    "StylistService",
    "UserAction",
    "UserMessage",
    "ensure_credential",
    "poll_until_done",
    "reselect_credential",
    "respond_to_failure",
    "user_message_for",
]
