"""
Cart Party Primitive — Customer Snapshot
==========================================
Engine: Core Primitives

At most one customer is selected for a cart at a time (or none).
Wholesale customers may carry a negotiated discount percentage and
their own minimum quantity for the wholesale price tier.

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class CustomerType(Enum):
    """Commercial classification of a customer."""
    RETAIL = "RETAIL"
    WHOLESALE = "WHOLESALE"


# ══════════════════════════════════════════════════════════════
# CUSTOMER (Immutable Snapshot)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Customer:
    """
    Selected customer as seen by the pricing policy.

    wholesale_discount is a percentage (10 means 10% off).
    """

    customer_id: str
    name: str = ""
    customer_type: CustomerType = CustomerType.RETAIL
    wholesale_discount: Optional[float] = None
    min_wholesale_quantity: Optional[int] = None

    def __post_init__(self):
        if not self.customer_id or not isinstance(self.customer_id, str):
            raise ValueError("customer_id must be non-empty string.")
        if not isinstance(self.customer_type, CustomerType):
            raise ValueError("customer_type must be CustomerType enum.")
        if (self.wholesale_discount is not None
                and not 0 <= self.wholesale_discount <= 100):
            raise ValueError(
                f"wholesale_discount must be between 0 and 100, "
                f"got {self.wholesale_discount}."
            )

    @property
    def is_wholesale(self) -> bool:
        return self.customer_type == CustomerType.WHOLESALE

    def to_dict(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "name": self.name,
            "customer_type": self.customer_type.value,
            "wholesale_discount": self.wholesale_discount,
            "min_wholesale_quantity": self.min_wholesale_quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Customer:
        return cls(
            customer_id=data["customer_id"],
            name=data.get("name", ""),
            customer_type=CustomerType(data.get("customer_type", "RETAIL")),
            wholesale_discount=data.get("wholesale_discount"),
            min_wholesale_quantity=data.get("min_wholesale_quantity"),
        )
