"""
Cart Engine — Drafts
======================
A draft is a parked cart: which products at which quantities, plus the
pricing inputs that were active (customer, wholesale mode, discount).

Prices are deliberately NOT stored. Restoring a draft re-adds every
line against the catalog current at restore time, so stock is
re-validated and prices re-derived.

This file contains NO persistence logic. Drafts serialise to plain
dicts; where they are kept is the caller's concern.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from engines.cart.discounts import DiscountType
from engines.cart.store import CartSnapshot


@dataclass(frozen=True)
class DraftLine:
    product_id: str
    quantity: int

    def __post_init__(self):
        if not self.product_id:
            raise ValueError("product_id must be non-empty.")
        if not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError("quantity must be positive integer.")


@dataclass(frozen=True)
class CartDraft:
    lines: Tuple[DraftLine, ...] = ()
    discount: float = 0.0
    discount_type: DiscountType = DiscountType.FIXED_AMOUNT
    notes: str = ""
    wholesale_mode: bool = False
    customer_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "lines": [
                {"product_id": line.product_id, "quantity": line.quantity}
                for line in self.lines
            ],
            "discount": self.discount,
            "discount_type": self.discount_type.value,
            "notes": self.notes,
            "wholesale_mode": self.wholesale_mode,
            "customer_id": self.customer_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CartDraft:
        return cls(
            lines=tuple(
                DraftLine(product_id=line["product_id"], quantity=int(line["quantity"]))
                for line in data.get("lines", [])
            ),
            discount=float(data.get("discount", 0.0)),
            discount_type=DiscountType(
                data.get("discount_type", DiscountType.FIXED_AMOUNT.value)
            ),
            notes=data.get("notes", ""),
            wholesale_mode=bool(data.get("wholesale_mode", False)),
            customer_id=data.get("customer_id"),
        )


def build_draft(
    snapshot: CartSnapshot,
    *,
    discount: float = 0.0,
    discount_type: DiscountType = DiscountType.FIXED_AMOUNT,
    notes: str = "",
    wholesale_mode: bool = False,
    customer_id: Optional[str] = None,
) -> CartDraft:
    return CartDraft(
        lines=tuple(
            DraftLine(product_id=line.product_id, quantity=line.quantity)
            for line in snapshot
        ),
        discount=discount,
        discount_type=discount_type,
        notes=notes,
        wholesale_mode=wholesale_mode,
        customer_id=customer_id,
    )
