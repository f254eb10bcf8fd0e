# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Live voice consultation session.

The session runs outside the request manager's lane: it is a long-lived
bidirectional stream, not a single call. Callers must release it with
stop() (or use it as an async context manager); otherwise the connection
and the audio output stay open.

State machine:

    IDLE --start()--> STREAMING --interrupted--> INTERRUPTED
                          ^                           |
                          +-------- audio chunk ------+
    any state --stop()--> STOPPED
"""

import inspect
import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any

from typing_extensions import Self

from ..config import LiveConfig
from ..exceptions import SessionClosedError
from ..protocols.audio import AudioOutputProtocol
from ..protocols.backend import (
    GenerativeBackendProtocol,
    LiveConnectionProtocol,
    LiveServerMessage,
)
from .audio import decode_base64, encode_base64, float_to_pcm16
from .playback import PlaybackScheduler

logger = logging.getLogger(__name__)

# (text, is_model): is_model is False for the user's own transcribed speech
TextHandler = Callable[[str, bool], Any]


class SessionState(Enum):
    """Lifecycle states of a live session."""

    IDLE = "idle"
    STREAMING = "streaming"
    INTERRUPTED = "interrupted"
    STOPPED = "stopped"


class LiveConsultSession:
    """
    Handle of a live voice consultation.

    Inbound transcriptions are forwarded to on_text; inbound audio is
    scheduled gaplessly on the output; an interruption signal from the
    server stops all queued audio.

    Example:
        >>> async with LiveConsultSession(backend, on_text, speaker) as session:
        ...     async for chunk in microphone:
        ...         await session.send(chunk)
    """

    def __init__(
        self,
        backend: GenerativeBackendProtocol,
        on_text: TextHandler,
        output: AudioOutputProtocol,
        config: LiveConfig | None = None,
    ):
        self.backend = backend
        self.config = config or LiveConfig()
        self._on_text = on_text
        self._playback = PlaybackScheduler(
            output, self.config.output_sample_rate, self.config.channels
        )
        self._connection: LiveConnectionProtocol | None = None
        self.state = SessionState.IDLE

    @property
    def playback(self) -> PlaybackScheduler:
        return self._playback

    def _connect_config(self) -> dict[str, Any]:
        return {
            "responseModalities": ["AUDIO"],
            "outputAudioTranscription": {},
            "inputAudioTranscription": {},
            "speechConfig": {
                "voiceConfig": {
                    "prebuiltVoiceConfig": {"voiceName": self.config.live_voice}
                }
            },
        }

    async def start(self) -> Self:
        """Open the live connection."""
        if self.state is SessionState.STOPPED:
            raise SessionClosedError("Live session already stopped")
        if self._connection is not None:
            return self

        try:
            self._connection = await self.backend.connect_live(
                self.config.live_model, self._connect_config(), self.handle_message
            )
        except Exception:
            self.state = SessionState.STOPPED
            self._playback.close()
            raise

        self.state = SessionState.STREAMING
        logger.info(f"Live consult session started ({self.config.live_model})")
        return self

    async def handle_message(self, message: LiveServerMessage) -> None:
        """Apply one inbound server message."""
        if self.state is SessionState.STOPPED:
            return

        if message.output_transcription:
            await self._emit_text(message.output_transcription, True)
        if message.input_transcription:
            await self._emit_text(message.input_transcription, False)

        if message.audio_data:
            self._playback.schedule(decode_base64(message.audio_data))
            self.state = SessionState.STREAMING

        if message.interrupted:
            self._playback.interrupt()
            self.state = SessionState.INTERRUPTED

    async def _emit_text(self, text: str, is_model: bool) -> None:
        result = self._on_text(text, is_model)
        if inspect.isawaitable(result):
            await result

    async def send(self, chunk: bytes | Sequence[float]) -> None:
        """
        Send a microphone chunk.

        Args:
            chunk: Raw PCM16 bytes, or float samples in [-1.0, 1.0)

        Raises:
            SessionClosedError: The session is not started or already stopped
        """
        if self.state is SessionState.STOPPED or self._connection is None:
            raise SessionClosedError("Live session is not open")
        if isinstance(chunk, (bytes, bytearray)):
            pcm = bytes(chunk)
        else:
            pcm = float_to_pcm16(chunk)
        await self._connection.send_realtime_input(
            encode_base64(pcm), self.config.input_mime_type
        )

    async def stop(self) -> None:
        """Release audio and close the connection. Safe to call twice."""
        if self.state is SessionState.STOPPED:
            return
        self.state = SessionState.STOPPED
        self._playback.close()

        connection, self._connection = self._connection, None
        if connection is not None:
            await connection.close()
        logger.info("Live consult session stopped")

    async def __aenter__(self) -> Self:
        return await self.start()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.stop()


__all__ = ["LiveConsultSession", "SessionState", "TextHandler"]
