# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Traffic class definitions for request throttling.

Every call to the generative backend targets one model family. The family
decides which cooldown window applies before the call may be dispatched.
"""

from enum import Enum


class TrafficClass(Enum):
    """
    Backend tier targeted by a unit of work.

    Classes:
        * **PRO**: High-capability models (deep reasoning, image and video
          generation, grounded shopping analysis). Tight per-minute ceiling.
        * **FLASH**: Fast models (quick analysis, categorization, image
          edits). Looser per-minute ceiling.

    Both classes share one global execution lane; only the cooldown window
    differs.
    """

    PRO = "pro"
    FLASH = "flash"

    @classmethod
    def parse(cls, value: "str | TrafficClass") -> "TrafficClass":
        """Accept either a member or its string value ("pro" / "flash")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as e:
            raise ValueError(f"Unknown traffic class: {value!r}") from e


__all__ = ["TrafficClass"]
