# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol definitions for the wardrobe throttle library."""

from .audio import AudioOutputProtocol, ScheduledBufferProtocol
from .backend import (
    Candidate,
    GenerateContentResponse,
    GenerativeBackendProtocol,
    InlineData,
    LiveConnectionProtocol,
    LiveMessageHandler,
    LiveServerMessage,
    Part,
    VideoOperation,
)
from .credentials import CredentialHostProtocol

__all__ = [
    "AudioOutputProtocol",
    "Candidate",
    "CredentialHostProtocol",
    "GenerateContentResponse",
    "GenerativeBackendProtocol",
    "InlineData",
    "LiveConnectionProtocol",
    "LiveMessageHandler",
    "LiveServerMessage",
    "Part",
    "ScheduledBufferProtocol",
    "VideoOperation",
]
