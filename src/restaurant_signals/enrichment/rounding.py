"""Decimal rounding helpers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int) -> float:
    """Round to ``places`` decimals, ties away from zero.

    Works on the shortest decimal repr of the float, so 0.4875 rounds to 0.49
    even though its binary value sits just below the tie.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
