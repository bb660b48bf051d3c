"""
Cart Totals Aggregator
========================
Pure derivation of the cart summary from the current lines.

    subtotal        = round2(Σ line.total)
    discount_amount = round2(flat_discount)
    taxable_base    = max(0, subtotal − discount_amount)
    tax_amount      = tax_rule.compute_tax(taxable_base)
    total           = round2(taxable_base + tax_amount)
    item_count      = Σ line.quantity

Never memoised: callers recompute from the current snapshot on every read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from core.config.rules import TaxRule
from core.primitives.money import round2, sum2
from engines.cart.store import CartLineItem


@dataclass(frozen=True)
class CartTotals:
    subtotal: float = 0.0
    discount_amount: float = 0.0
    tax_amount: float = 0.0
    total: float = 0.0
    item_count: int = 0

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount_amount": self.discount_amount,
            "tax_amount": self.tax_amount,
            "total": self.total,
            "item_count": self.item_count,
        }


ZERO_TOTALS = CartTotals()


def cart_subtotal(items: Iterable[CartLineItem]) -> float:
    return sum2(line.total for line in items)


def compute_totals(
    items: Iterable[CartLineItem],
    flat_discount: float = 0.0,
    tax_rule: Optional[TaxRule] = None,
) -> CartTotals:
    items = tuple(items)
    if not items:
        return ZERO_TOTALS

    subtotal = cart_subtotal(items)
    discount_amount = round2(flat_discount)
    taxable_base = max(0.0, subtotal - discount_amount)
    tax_amount = (tax_rule or TaxRule()).compute_tax(taxable_base)
    return CartTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax_amount=tax_amount,
        total=round2(taxable_base + tax_amount),
        item_count=sum(line.quantity for line in items),
    )
