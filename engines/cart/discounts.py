"""
Cart Engine — Flat Discount Input
===================================
The totals aggregator consumes a flat discount amount. Cashiers enter
either a percentage of the subtotal or a fixed amount; this module
normalises, validates and resolves that input into the flat amount.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, List

from core.primitives.money import round2


class DiscountType(Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


def normalize_discount_input(value: Any) -> float:
    """
    Coerce raw input into a finite float.

    Numbers are kept as-is, numeric strings are parsed, anything else
    (None, NaN, infinities, containers, unparsable text) becomes 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def validate_discount(
    value: float,
    discount_type: DiscountType,
    subtotal: float,
) -> List[str]:
    """Return every violated rule as a message; empty means valid."""
    errors = []
    if value < 0:
        errors.append("Discount must be a positive value.")
    if discount_type == DiscountType.PERCENTAGE and value > 100:
        errors.append("Percentage discount cannot exceed 100%.")
    if discount_type == DiscountType.FIXED_AMOUNT and value > subtotal:
        errors.append(
            f"Discount ({value}) cannot exceed the subtotal ({subtotal})."
        )
    return errors


def is_valid_discount(
    value: float,
    discount_type: DiscountType,
    subtotal: float,
) -> bool:
    return not validate_discount(value, discount_type, subtotal)


def resolve_discount_amount(
    value: float,
    discount_type: DiscountType,
    subtotal: float,
) -> float:
    """Flat amount the totals aggregator should subtract."""
    if value <= 0:
        return 0.0
    if discount_type == DiscountType.PERCENTAGE:
        return round2(subtotal * min(value, 100) / 100)
    return round2(value)
