"""
Cart Money Primitive — Two-Decimal Rounding
=============================================
Engine: Core Primitives

Cart amounts are plain floats in major units (e.g. 12.50) rounded to
two decimals at every monetary computation point, so that repeated
recalculations never accumulate floating-point drift.

RULES (NON-NEGOTIABLE):
- Half-up rounding (1.005 → 1.01, 2.675 → 2.68)
- Rounding goes through the shortest decimal repr of the float,
  which absorbs binary representation error (0.1 + 0.2 → 0.3)
- Every rounded value is returned as float
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

CENT = Decimal("0.01")


def to_decimal(value: float) -> Decimal:
    """Exact decimal view of the float's shortest repr."""
    return Decimal(str(value))


def round2(value: float) -> float:
    """Round a monetary amount to 2 decimals, half-up."""
    return float(to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def sum2(values: Iterable[float]) -> float:
    """Sum amounts exactly in decimal space, then round once."""
    total = sum((to_decimal(v) for v in values), Decimal(0))
    return float(total.quantize(CENT, rounding=ROUND_HALF_UP))
