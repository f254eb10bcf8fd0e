# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Live voice consultation support.

This module provides:
- LiveConsultSession: Session handle with send() and stop()
- SessionState: Session lifecycle states
- PlaybackScheduler: Gapless scheduling of streamed audio chunks
- PCM helpers for base64/PCM16/float conversion
"""

from .audio import (
    decode_base64,
    encode_base64,
    float_to_pcm16,
    pcm16_duration,
    pcm16_to_float,
)
from .playback import PlaybackScheduler
from .session import LiveConsultSession, SessionState, TextHandler

__all__ = [
    "LiveConsultSession",
    "PlaybackScheduler",
    "SessionState",
    "TextHandler",
    "decode_base64",
    "encode_base64",
    "float_to_pcm16",
    "pcm16_duration",
    "pcm16_to_float",
]
