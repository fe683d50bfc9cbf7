"""Tests for number, percentage and duration formatting."""

import pytest

from case_eval.reporting.infrastructure.render_numbers import (
    render_duration,
    render_number,
    render_percentage,
)


class TestRenderNumber:
    """Integers are grouped; floats keep three significant figures."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1234, "1,234"),
            (3.0, "3"),
            (3.14159, "3.14"),
            (123.456, "123.5"),
            (12345.678, "12,345.7"),
            (0.012345, "0.0123"),
            (-0.5, "-0.500"),
            (float("inf"), "inf"),
        ],
    )
    def test_render_number(self, value: float, expected: str) -> None:
        assert render_number(value) == expected


class TestRenderPercentage:
    """Fractions render with one decimal."""

    def test_render_percentage(self) -> None:
        assert render_percentage(0.75) == "75.0%"
        assert render_percentage(1) == "100.0%"


class TestRenderDuration:
    """Durations pick the unit by magnitude."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0s"),
            (0.0000005, "0.5µs"),
            (0.00025, "250µs"),
            (0.0123, "12.3ms"),
            (2.5, "2.5s"),
            (3725.0, "3,725.0s"),
        ],
    )
    def test_render_duration(self, seconds: float, expected: str) -> None:
        assert render_duration(seconds) == expected
