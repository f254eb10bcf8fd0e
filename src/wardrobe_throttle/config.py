# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Configuration for the wardrobe throttle library.

This module provides configuration classes for the request manager
(cooldown windows, retry policy, metrics), the backend model names used by
the stylist service, and the live voice consultation.
"""

from dataclasses import dataclass

from .exceptions import ConfigurationError
from .types.traffic import TrafficClass


@dataclass
class ThrottleConfig:
    """
    Configuration for the serialized request manager.

    Cooldown windows are chosen conservatively below the backend's published
    per-minute request ceiling for each tier (2 RPM for PRO, 15 RPM for
    FLASH on the free tier).
    """

    # === Cooldown Windows ===

    pro_cooldown: float = 32.0
    """Minimum spacing in seconds between PRO dispatches."""

    flash_cooldown: float = 5.0
    """Minimum spacing in seconds between FLASH dispatches."""

    # === Retry Policy ===

    max_attempts: int = 2
    """Total attempts per operation, including the first one."""

    quota_reset_delay: float = 60.0
    """Delay in seconds forced on every class after a quota violation."""

    transient_retry_delay: float = 5.0
    """Delay in seconds before retrying a transient server failure."""

    quota_status_code: int = 429
    """HTTP status code signalling a quota violation."""

    transient_status_codes: tuple[int, ...] = (503, 504)
    """HTTP status codes treated as transient and safe to retry."""

    # === Metrics and Monitoring ===

    metrics_enabled: bool = True
    """Enable metrics collection."""

    prometheus_enabled: bool = True
    """Mirror metrics to prometheus_client when it is installed."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.pro_cooldown <= 0:
            raise ConfigurationError("pro_cooldown must be positive")
        if self.flash_cooldown <= 0:
            raise ConfigurationError("flash_cooldown must be positive")
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.quota_reset_delay < 0:
            raise ConfigurationError("quota_reset_delay must not be negative")
        if self.transient_retry_delay < 0:
            raise ConfigurationError("transient_retry_delay must not be negative")
        self.transient_status_codes = tuple(self.transient_status_codes)

    def cooldown_for(self, traffic_class: TrafficClass) -> float:
        """Return the cooldown window for a traffic class."""
        if traffic_class is TrafficClass.PRO:
            return self.pro_cooldown
        if traffic_class is TrafficClass.FLASH:
            return self.flash_cooldown
        raise ConfigurationError(f"Unknown traffic class: {traffic_class!r}")


@dataclass
class ModelConfig:
    """
    Backend model names used by the stylist service.

    PRO-class operations use the high-capability models, FLASH-class
    operations the fast ones.
    """

    # PRO models
    image_model: str = "gemini-3-pro-image-preview"
    deep_model: str = "gemini-3-pro-preview"
    video_model: str = "veo-3.1-fast-generate-preview"
    shopping_model: str = "gemini-3-pro-preview"

    # FLASH models
    edit_model: str = "gemini-2.5-flash-image"
    fast_model: str = "gemini-flash-lite-latest"
    maps_model: str = "gemini-2.5-flash"
    categorize_model: str = "gemini-flash-lite-latest"
    separate_model: str = "gemini-3-flash-preview"
    background_model: str = "gemini-2.5-flash-image"
    outfit_model: str = "gemini-3-flash-preview"

    # Unthrottled
    tts_model: str = "gemini-2.5-flash-preview-tts"

    thinking_budget: int = 32768
    """Thinking budget for deep styling advice."""

    video_poll_interval: float = 10.0
    """Seconds between status checks of a running video job."""

    video_resolution: str = "720p"
    video_aspect_ratio: str = "9:16"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.video_poll_interval <= 0:
            raise ConfigurationError("video_poll_interval must be positive")
        if self.thinking_budget < 0:
            raise ConfigurationError("thinking_budget must not be negative")


@dataclass
class LiveConfig:
    """Configuration for text-to-speech and the live voice consultation."""

    live_model: str = "gemini-2.5-flash-native-audio-preview-09-2025"

    live_voice: str = "Kore"
    """Prebuilt voice used by the live consultation."""

    tts_voice: str = "Puck"
    """Prebuilt voice used for one-shot speech synthesis."""

    input_sample_rate: int = 16000
    """Sample rate of microphone audio sent to the backend."""

    output_sample_rate: int = 24000
    """Sample rate of audio returned by the backend."""

    channels: int = 1

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.input_sample_rate <= 0 or self.output_sample_rate <= 0:
            raise ConfigurationError("sample rates must be positive")
        if self.channels < 1:
            raise ConfigurationError("channels must be at least 1")

    @property
    def input_mime_type(self) -> str:
        """Mime type announced for outgoing microphone chunks."""
        return f"audio/pcm;rate={self.input_sample_rate}"


__all__ = [
    "LiveConfig",
    "ModelConfig",
    "ThrottleConfig",
]
