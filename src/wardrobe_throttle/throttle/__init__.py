# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request throttling for calls to the generative backend.

This module provides:
- CooldownTracker: Per traffic-class earliest-dispatch timestamps
- ErrorCategory, classify_error: Failure classification driving retries
- RequestManager: The single global execution lane with retry policy
"""

from .classifier import ErrorCategory, classify_error, extract_status_code
from .cooldown import CooldownTracker
from .manager import LaneItem, RequestManager

__all__ = [
    "CooldownTracker",
    "ErrorCategory",
    "LaneItem",
    "RequestManager",
    "classify_error",
    "extract_status_code",
]
