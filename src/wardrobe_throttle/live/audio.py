# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
PCM helpers for backend audio.

The backend exchanges little-endian signed 16-bit PCM, base64-encoded.
Playback devices take float samples in [-1.0, 1.0).
"""

import base64
import struct
from collections.abc import Sequence

PCM16_SCALE = 32768.0


def decode_base64(data: str) -> bytes:
    return base64.b64decode(data)


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def pcm16_to_float(data: bytes, channels: int = 1) -> list[list[float]]:
    """
    Decode interleaved PCM16 into one list of float samples per channel.

    A trailing odd byte is ignored.
    """
    count = len(data) // 2
    samples = struct.unpack(f"<{count}h", data[: count * 2])
    frames = count // channels
    return [
        [samples[i * channels + c] / PCM16_SCALE for i in range(frames)]
        for c in range(channels)
    ]


def float_to_pcm16(samples: Sequence[float]) -> bytes:
    """Encode float samples as PCM16, clamping to the int16 range."""
    ints = [max(-32768, min(32767, int(s * PCM16_SCALE))) for s in samples]
    return struct.pack(f"<{len(ints)}h", *ints)


def pcm16_duration(data: bytes, sample_rate: int, channels: int = 1) -> float:
    """Playback length in seconds of a PCM16 buffer."""
    return (len(data) // (2 * channels)) / sample_rate


__all__ = [
    "decode_base64",
    "encode_base64",
    "float_to_pcm16",
    "pcm16_duration",
    "pcm16_to_float",
]
