"""Tests for the TrafficClass enum."""

import pytest

from wardrobe_throttle.types import TrafficClass


class TestTrafficClass:
    def test_values(self):
        assert TrafficClass.PRO.value == "pro"
        assert TrafficClass.FLASH.value == "flash"

    def test_members(self):
        assert set(TrafficClass) == {TrafficClass.PRO, TrafficClass.FLASH}

    def test_parse_member(self):
        """parse() returns members unchanged."""
        assert TrafficClass.parse(TrafficClass.PRO) is TrafficClass.PRO

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("pro", TrafficClass.PRO),
            ("flash", TrafficClass.FLASH),
            ("FLASH", TrafficClass.FLASH),
        ],
    )
    def test_parse_string(self, value, expected):
        """parse() accepts string values case-insensitively."""
        assert TrafficClass.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown traffic class"):
            TrafficClass.parse("ultra")
