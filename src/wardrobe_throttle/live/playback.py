# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Gapless playback scheduling for streamed audio.

Audio arrives from the backend in chunks. Each chunk is scheduled to start
exactly where the previous one ends, so speech plays without gaps even when
chunks arrive faster than real time. An interruption from the server stops
everything already queued.
"""

import logging

from ..protocols.audio import AudioOutputProtocol, ScheduledBufferProtocol
from .audio import pcm16_to_float

logger = logging.getLogger(__name__)


class PlaybackScheduler:
    """
    Tracks a running "next playback time" and the buffers still queued.

    Attributes:
        next_time: Device time at which the next chunk will start.
        scheduled: Buffers still queued or playing, mapped to their end time.
    """

    def __init__(
        self, output: AudioOutputProtocol, sample_rate: int = 24000, channels: int = 1
    ):
        self.output = output
        self.sample_rate = sample_rate
        self.channels = channels
        self.next_time = 0.0
        self.scheduled: dict[ScheduledBufferProtocol, float] = {}

    def schedule(self, pcm: bytes) -> ScheduledBufferProtocol:
        """
        Queue a PCM16 chunk right after everything already scheduled.

        If the output has run dry, the chunk starts at the device's current
        time instead of in the past. Buffers that have finished playing are
        forgotten.
        """
        now = self.output.current_time
        self._prune(now)
        self.next_time = max(self.next_time, now)
        samples = pcm16_to_float(pcm, self.channels)[0]
        buffer = self.output.play(samples, self.sample_rate, start_at=self.next_time)
        self.next_time += buffer.duration
        self.scheduled[buffer] = self.next_time
        return buffer

    def _prune(self, now: float) -> None:
        finished = [buffer for buffer, end in self.scheduled.items() if end <= now]
        for buffer in finished:
            del self.scheduled[buffer]

    def interrupt(self) -> int:
        """Stop and forget all scheduled buffers; returns how many were stopped."""
        stopped = len(self.scheduled)
        for buffer in list(self.scheduled):
            buffer.stop()
        self.scheduled.clear()
        self.next_time = 0.0
        if stopped:
            logger.debug(f"Interrupted playback, stopped {stopped} buffers")
        return stopped

    def close(self) -> None:
        self.interrupt()
        self.output.close()


__all__ = ["PlaybackScheduler"]
