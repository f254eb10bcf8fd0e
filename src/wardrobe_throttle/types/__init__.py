# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Core types for the wardrobe throttle library.

This module exports:
- TrafficClass: Backend tier targeted by a unit of work
"""

from .traffic import TrafficClass

__all__ = [
    "TrafficClass",
]
