"""Tests for number text: shortest form, rounding, and trimming."""

from __future__ import annotations

import math

import pytest

from formatting import (
    format_number,
    parse_display,
    render_history,
    round_half_up,
    trimmed,
)
from models import HistoryEntry


class TestFormatNumber:

    @pytest.mark.parametrize(
        "value, text",
        [
            (7.0, "7"),
            (-3.0, "-3"),
            (0.0, "0"),
            (-0.0, "0"),
            (0.5, "0.5"),
            (0.1 + 0.2, "0.30000000000000004"),
            (1e20, "100000000000000000000"),
            (1e21, "1e+21"),
            (1.5e21, "1.5e+21"),
            (1e-6, "0.000001"),
            (1.5e-6, "0.0000015"),
            (1e-7, "1e-7"),
            (-2.5e-8, "-2.5e-8"),
            (123456.789, "123456.789"),
        ],
    )
    def test_shortest_text(self, value, text):
        assert format_number(value) == text

    def test_non_finite(self):
        assert format_number(math.inf) == "Infinity"
        assert format_number(-math.inf) == "-Infinity"
        assert format_number(math.nan) == "NaN"

    def test_accepts_int(self):
        assert format_number(42) == "42"


class TestRounding:

    def test_seven_places(self):
        assert round_half_up(1 / 3) == 0.3333333
        assert round_half_up(2 / 3) == 0.6666667

    def test_ties_away_from_zero(self):
        # 1/256 is exact in binary, so the 8th digit is a true tie.
        assert round_half_up(0.00390625) == 0.0039063
        assert round_half_up(-0.00390625) == -0.0039063

    def test_large_values_pass_through(self):
        assert round_half_up(1.5e21) == 1.5e21

    def test_non_finite_pass_through(self):
        assert math.isinf(round_half_up(math.inf))

    def test_zero_places(self):
        assert round_half_up(2.5, 0) == 3.0

    def test_many_places_with_large_integer_part(self):
        value = 123456789 / 7
        assert round_half_up(value, 60) == value
        assert trimmed(value, 60) == format_number(value)

    def test_many_places_near_fixed_limit(self):
        assert round_half_up(9.5e20, 40) == 9.5e20


class TestTrimmed:

    @pytest.mark.parametrize(
        "value, text",
        [
            (1 / 3, "0.3333333"),
            (0.1 + 0.2, "0.3"),
            (14.0, "14"),
            (2.50, "2.5"),
            (1e-8, "0"),
            (-1e-8, "0"),
            (1e-7, "1e-7"),
            (-0.00000004, "0"),
            (1234.56789012, "1234.5678901"),
        ],
    )
    def test_trimmed_form(self, value, text):
        assert trimmed(value) == text

    def test_custom_places(self):
        assert trimmed(1 / 3, 2) == "0.33"


class TestHelpers:

    @pytest.mark.parametrize(
        "text, value", [("0", 0.0), ("5.", 5.0), ("0.", 0.0), ("-1.5", -1.5), ("1e-7", 1e-7)]
    )
    def test_parse_display(self, text, value):
        assert parse_display(text) == value

    def test_render_history(self):
        history = (
            HistoryEntry(expression="7 × 2", result="14"),
            HistoryEntry(expression="3 + 4", result="7"),
        )
        assert render_history(history) == ["7 × 2 = 14", "3 + 4 = 7"]
