# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocols for audio playback used by speech and live consultation."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class ScheduledBufferProtocol(Protocol):
    """A buffer queued on an audio output."""

    @property
    def duration(self) -> float:
        """Length of the buffer in seconds."""
        ...

    def stop(self) -> None:
        """Stop playback of this buffer (no-op if it already ended)."""
        ...


@runtime_checkable
class AudioOutputProtocol(Protocol):
    """
    Minimal audio output device.

    current_time is the device clock in seconds; buffers are scheduled
    against it.
    """

    @property
    def current_time(self) -> float:
        ...

    def play(
        self,
        samples: Sequence[float],
        sample_rate: int,
        start_at: float | None = None,
    ) -> ScheduledBufferProtocol:
        """Schedule mono float samples; start_at=None plays immediately."""
        ...

    def close(self) -> None:
        """Release the device."""
        ...
