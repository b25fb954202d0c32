"""Tests for shared display helpers."""

import pytest

from qualityhub.display import delta_string, format_duration, percent_change


class TestFormatDuration:
    @pytest.mark.parametrize(
        "ms,expected",
        [(0, "0ms"), (850, "850ms"), (2500, "2.5s"), (59_900, "59.9s"), (303_000, "5m 3s")],
    )
    def test_formats(self, ms, expected):
        assert format_duration(ms) == expected


class TestDeltaString:
    def test_increase(self):
        assert delta_string(92.0, 90.0) == "▲ +2.0%"

    def test_decrease(self):
        assert delta_string(85.0, 90.0) == "▼ -5.0%"

    def test_lower_is_better(self):
        assert delta_string(10.0, 20.0, higher_is_better=False) == "▲ -10.0%"

    def test_unchanged(self):
        assert delta_string(90.02, 90.0) == ""


def test_percent_change():
    assert percent_change(1500, 1000) == pytest.approx(50.0)
