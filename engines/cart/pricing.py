"""
Cart Pricing Policy — Unit Price & Discount Derivation
========================================================

RULES (NON-NEGOTIABLE):
- Deterministic: same (product, quantity, customer, mode) → same quote
- No I/O, no clock, no mutation
- Every monetary value is rounded with round2

Derivation:
    1. base = retail price
    2. wholesale tier when the mode is active, the product has a
       positive wholesale price, and the quantity threshold is met
       (or the product defines no threshold)
    3. wholesale customer discount percentage applied on top
    4. unit price = round2(base)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.primitives.item import Product
from core.primitives.money import round2
from core.primitives.party import Customer


@dataclass(frozen=True)
class PriceQuote:
    unit_price: float
    unit_discount: float = 0.0


def wholesale_threshold(product: Product, customer: Optional[Customer]) -> int:
    """Largest of the product and customer minimum wholesale quantities."""
    product_min = product.min_wholesale_quantity or 0
    customer_min = (customer.min_wholesale_quantity or 0) if customer else 0
    return max(product_min, customer_min)


def is_wholesale_eligible(
    product: Product,
    quantity: int,
    customer: Optional[Customer],
    wholesale_mode: bool,
) -> bool:
    if not wholesale_mode or not product.has_wholesale_price:
        return False
    # A product without its own threshold sells at wholesale from unit one.
    if not product.min_wholesale_quantity:
        return True
    return quantity >= wholesale_threshold(product, customer)


def price_line(
    product: Product,
    quantity: int,
    customer: Optional[Customer],
    wholesale_mode: bool,
) -> PriceQuote:
    base = product.retail_price
    if is_wholesale_eligible(product, quantity, customer, wholesale_mode):
        base = product.wholesale_price

    unit_discount = 0.0
    if (customer is not None and customer.is_wholesale
            and customer.wholesale_discount and customer.wholesale_discount > 0):
        discounted = base * (1 - customer.wholesale_discount / 100)
        unit_discount = round2(base - discounted)
        base = discounted

    return PriceQuote(unit_price=round2(base), unit_discount=unit_discount)


def line_total(unit_price: float, quantity: int) -> float:
    return round2(unit_price * quantity)
