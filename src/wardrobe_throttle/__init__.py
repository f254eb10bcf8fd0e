# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Wardrobe Throttle - Serialized request throttling for a generative AI backend.

This library routes every AI call of the wardrobe application through one
global execution lane, spacing calls per model tier and retrying quota and
availability failures with fixed delays.

Key Features:
    - Strict FIFO execution, one backend call in flight at a time
    - Per traffic-class cooldown windows (PRO 32s, FLASH 5s)
    - Classified errors: quota, invalid credential, transient, other
    - Account-wide 60s reset after a quota violation
    - Stylist service covering image, video, analysis and shopping features
    - Live voice consultation with gapless audio playback

Quick Start:
    >>> from wardrobe_throttle import RequestManager, StylistService
    >>>
    >>> async with RequestManager() as manager:
    ...     stylist = StylistService(backend, manager)
    ...     advice = await stylist.ask_stylist_deep("Capsule wardrobe for Lisbon?")
    ...     manager.wait_time_seconds("pro")
    32

Main Exports:
    - RequestManager, CooldownTracker: Core throttling components
    - ThrottleConfig, ModelConfig, LiveConfig: Configuration options
    - StylistService: The application's AI features
    - LiveConsultSession: Live voice consultation handle
    - GenerativeBackendProtocol: Protocol for backend adapters

Note: Prometheus metrics require the 'prometheus' extra. Install with:
    pip install wardrobe-throttle[prometheus]

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import LiveConfig, ModelConfig, ThrottleConfig
from .exceptions import (
    ConfigurationError,
    GenerationError,
    InvalidCredentialError,
    QuotaExceededError,
    SessionClosedError,
    ThrottlerError,
)
from .live import LiveConsultSession, PlaybackScheduler, SessionState
from .models import ClothingItem, GeoLocation, ShoppingRecommendation
from .observability import ThrottleMetrics
from .protocols import (
    AudioOutputProtocol,
    CredentialHostProtocol,
    GenerativeBackendProtocol,
)
from .services import (
    StylistService,
    ensure_credential,
    respond_to_failure,
    user_message_for,
)
from .throttle import CooldownTracker, ErrorCategory, RequestManager, classify_error
from .types import TrafficClass

__all__ = [
    "AudioOutputProtocol",
    "ClothingItem",
    "ConfigurationError",
    "CooldownTracker",
    "CredentialHostProtocol",
    "ErrorCategory",
    "GenerationError",
    "GenerativeBackendProtocol",
    "GeoLocation",
    "InvalidCredentialError",
    "LiveConfig",
    "LiveConsultSession",
    "ModelConfig",
    "PlaybackScheduler",
    "QuotaExceededError",
    "RequestManager",
    "SessionClosedError",
    "SessionState",
    "ShoppingRecommendation",
    "StylistService",
    "ThrottleConfig",
    "ThrottleMetrics",
    "ThrottlerError",
    "TrafficClass",
    "__version__",
    "classify_error",
    "ensure_credential",
    "respond_to_failure",
    "user_message_for",
]
