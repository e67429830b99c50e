"""Tests for utility helpers."""
import pytest

from support_mas.utils import clamp, format_duration, round_half_up, truncate_text


class TestHelpers:

    @pytest.mark.parametrize("value, expected", [(86.5, 87), (78.75, 79), (61.25, 61), (0.5, 1), (0, 0)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_clamp(self):
        assert clamp(105) == 100
        assert clamp(-3) == 0
        assert clamp(42) == 42

    def test_truncate_text(self):
        assert truncate_text("short") == "short"
        assert truncate_text("") == ""
        assert truncate_text("a" * 60) == "a" * 47 + "..."

    @pytest.mark.parametrize("ms, expected", [(250, "250ms"), (1500, "1.5s"), (125000, "2m 5s")])
    def test_format_duration(self, ms, expected):
        assert format_duration(ms) == expected
