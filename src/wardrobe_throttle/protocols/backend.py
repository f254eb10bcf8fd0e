# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol and response models for the generative backend.

The library does NOT talk to the network itself. An adapter around the
vendor SDK implements GenerativeBackendProtocol and converts SDK responses
into the small models below, which is all the stylist service reads.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from ..models.wardrobe import GroundingChunk


class _ResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class InlineData(_ResponseModel):
    """Base64 payload embedded in a response part (images, audio)."""

    data: str
    mime_type: str | None = Field(default=None, alias="mimeType")


class Part(_ResponseModel):
    text: str | None = None
    inline_data: InlineData | None = Field(default=None, alias="inlineData")


class Candidate(_ResponseModel):
    parts: list[Part] = Field(default_factory=list)
    grounding_chunks: list[GroundingChunk] = Field(
        default_factory=list, alias="groundingChunks"
    )


class GenerateContentResponse(_ResponseModel):
    """Result of a single content generation call."""

    text: str | None = None
    candidates: list[Candidate] = Field(default_factory=list)

    def first_inline_data(self) -> str | None:
        """Base64 data of the first inline part of the first candidate."""
        if not self.candidates:
            return None
        for part in self.candidates[0].parts:
            if part.inline_data is not None:
                return part.inline_data.data
        return None

    @property
    def grounding_chunks(self) -> list[GroundingChunk]:
        if not self.candidates:
            return []
        return list(self.candidates[0].grounding_chunks)


class VideoOperation(_ResponseModel):
    """Handle of a long-running video generation job."""

    name: str | None = None
    done: bool = False
    video_uri: str | None = Field(default=None, alias="videoUri")
    error: dict[str, Any] | None = None


class LiveServerMessage(_ResponseModel):
    """One inbound message of a live (bidirectional) session."""

    output_transcription: str | None = Field(
        default=None, alias="outputTranscription"
    )
    input_transcription: str | None = Field(default=None, alias="inputTranscription")
    audio_data: str | None = Field(default=None, alias="audioData")
    interrupted: bool = False


LiveMessageHandler = Callable[[LiveServerMessage], Awaitable[None]]


@runtime_checkable
class LiveConnectionProtocol(Protocol):
    """An open bidirectional session with the backend."""

    async def send_realtime_input(self, data: str, mime_type: str) -> None:
        """Send a base64-encoded media chunk."""
        ...

    async def close(self) -> None:
        """Close the session and release the connection."""
        ...


@runtime_checkable
class GenerativeBackendProtocol(Protocol):
    """
    Minimal protocol for the generative backend.

    Implementations raise the SDK's own exceptions on failure; the request
    manager classifies them by status code and message.
    """

    async def generate_content(
        self,
        model: str,
        contents: Any,
        config: dict[str, Any] | None = None,
    ) -> GenerateContentResponse:
        """Generate text, JSON, images or audio from the given contents."""
        ...

    async def generate_videos(
        self,
        model: str,
        prompt: str,
        config: dict[str, Any] | None = None,
    ) -> VideoOperation:
        """Start a video generation job."""
        ...

    async def get_video_operation(self, operation: VideoOperation) -> VideoOperation:
        """Refresh the state of a video generation job."""
        ...

    async def download(self, uri: str) -> bytes:
        """Download a generated file (authenticated by the adapter)."""
        ...

    async def connect_live(
        self,
        model: str,
        config: dict[str, Any],
        on_message: LiveMessageHandler,
    ) -> LiveConnectionProtocol:
        """Open a live session; inbound messages are passed to on_message."""
        ...


__all__ = [
    "Candidate",
    "GenerateContentResponse",
    "GenerativeBackendProtocol",
    "InlineData",
    "LiveConnectionProtocol",
    "LiveMessageHandler",
    "LiveServerMessage",
    "Part",
    "VideoOperation",
]
