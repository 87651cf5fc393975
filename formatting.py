"""Number text for the display and the history.

Two concerns live here:

- ``format_number`` renders a float in its shortest round-trip form,
  using fixed notation for decimal exponents in (-7, 21) and exponent
  notation (``1e-7``, ``1.5e+21``) outside that range.
- ``round_half_up`` / ``trimmed`` produce the *trimmed form*: a value
  rounded to a fixed number of decimal places and re-rendered without
  trailing zeros or a dangling decimal point.

Rounding works on the exact binary value of the float, with ties going
away from zero, so ``0.00390625`` trims to ``0.0039063`` at 7 places.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Iterable

from models import HistoryEntry

DEFAULT_PRECISION = 7

# Values at or above this magnitude are never rounded and always print
# in exponent notation.
FIXED_LIMIT = 1e21


def format_number(value: float) -> str:
    """Shortest text that parses back to ``value``."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < FIXED_LIMIT:
        return str(int(value))

    text = repr(value)
    if "e" not in text:
        return text

    mantissa, _, exponent = text.partition("e")
    power = int(exponent)
    if -7 < power < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{power:+d}"


def round_half_up(value: float, places: int = DEFAULT_PRECISION) -> float:
    """Round to ``places`` decimals, ties away from zero."""
    if not math.isfinite(value) or abs(value) >= FIXED_LIMIT:
        return value
    quantum = Decimal(1).scaleb(-places)
    # 21 integer digits at most below FIXED_LIMIT, plus the decimals.
    context = Context(prec=places + 22)
    rounded = Decimal(value).quantize(
        quantum, rounding=ROUND_HALF_UP, context=context
    )
    return float(rounded)


def trimmed(value: float, places: int = DEFAULT_PRECISION) -> str:
    """Trimmed form: rounded, then rendered without trailing zeros."""
    return format_number(round_half_up(value, places))


def parse_display(text: str) -> float:
    """Numeric value of a display string (``"5."`` parses as 5)."""
    return float(text)


def render_history(history: Iterable[HistoryEntry]) -> list[str]:
    return [entry.render() for entry in history]
