"""Tests for the PCM helpers."""

import struct

import pytest

from wardrobe_throttle.live.audio import (
    decode_base64,
    encode_base64,
    float_to_pcm16,
    pcm16_duration,
    pcm16_to_float,
)


class TestBase64:
    def test_encode_decode(self):
        assert encode_base64(b"\x00\x01\xff") == "AAH/"
        assert decode_base64("AAH/") == b"\x00\x01\xff"


class TestPcm16ToFloat:
    def test_mono(self):
        data = struct.pack("<3h", 0, 16384, -32768)
        assert pcm16_to_float(data) == [[0.0, 0.5, -1.0]]

    def test_stereo_deinterleaves(self):
        data = struct.pack("<4h", 16384, -16384, 8192, -8192)
        assert pcm16_to_float(data, channels=2) == [[0.5, 0.25], [-0.5, -0.25]]

    def test_trailing_odd_byte_ignored(self):
        data = struct.pack("<h", 16384) + b"\x01"
        assert pcm16_to_float(data) == [[0.5]]

    def test_empty(self):
        assert pcm16_to_float(b"") == [[]]


class TestFloatToPcm16:
    def test_encodes_little_endian(self):
        assert float_to_pcm16([0.5, -0.5]) == struct.pack("<2h", 16384, -16384)

    @pytest.mark.parametrize(
        "sample,expected", [(1.0, 32767), (2.5, 32767), (-3.0, -32768)]
    )
    def test_clamps(self, sample, expected):
        assert float_to_pcm16([sample]) == struct.pack("<h", expected)


class TestDuration:
    def test_mono_duration(self):
        assert pcm16_duration(b"\x00" * 48000, 24000) == 1.0

    def test_stereo_duration(self):
        assert pcm16_duration(b"\x00" * 48000, 24000, channels=2) == 0.5
