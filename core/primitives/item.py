"""
Cart Item Primitive — Catalog Product Snapshot
================================================
Engine: Core Primitives

The catalog collaborator owns and mutates products. The cart engine
only ever reads immutable snapshots of them: price tiers, wholesale
thresholds and current stock.

RULES (NON-NEGOTIABLE):
- Products are immutable snapshots (frozen)
- A refreshed catalog is a new tuple of new snapshots
- Prices are major-unit floats; rounding happens in the pricing layer

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


# ══════════════════════════════════════════════════════════════
# PRODUCT (Immutable Snapshot)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Product:
    """
    Catalog product as seen by the cart.

    Fields:
        product_id:             Unique identifier (cart line key)
        name:                   Display name
        retail_price:           Regular unit price
        stock_quantity:         Current on-hand stock
        wholesale_price:        Optional wholesale unit price
        min_wholesale_quantity: Optional quantity threshold for wholesale tier
        min_stock:              Optional per-product low-stock threshold
        sku:                    Optional stock keeping unit
    """

    product_id: str
    name: str
    retail_price: float
    stock_quantity: int
    wholesale_price: Optional[float] = None
    min_wholesale_quantity: Optional[int] = None
    min_stock: Optional[int] = None
    sku: Optional[str] = None

    def __post_init__(self):
        if not self.product_id or not isinstance(self.product_id, str):
            raise ValueError("product_id must be non-empty string.")
        if not isinstance(self.name, str):
            raise ValueError("name must be a string.")
        if self.retail_price < 0:
            raise ValueError("retail_price cannot be negative.")
        if not isinstance(self.stock_quantity, int):
            raise ValueError("stock_quantity must be an integer.")
        if self.wholesale_price is not None and self.wholesale_price < 0:
            raise ValueError("wholesale_price cannot be negative.")
        if (self.min_wholesale_quantity is not None
                and self.min_wholesale_quantity < 0):
            raise ValueError("min_wholesale_quantity cannot be negative.")

    @property
    def has_wholesale_price(self) -> bool:
        return self.wholesale_price is not None and self.wholesale_price > 0

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "retail_price": self.retail_price,
            "stock_quantity": self.stock_quantity,
            "wholesale_price": self.wholesale_price,
            "min_wholesale_quantity": self.min_wholesale_quantity,
            "min_stock": self.min_stock,
            "sku": self.sku,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Product:
        return cls(
            product_id=data["product_id"],
            name=data.get("name", ""),
            retail_price=float(data["retail_price"]),
            stock_quantity=int(data.get("stock_quantity", 0)),
            wholesale_price=(
                float(data["wholesale_price"])
                if data.get("wholesale_price") is not None else None
            ),
            min_wholesale_quantity=data.get("min_wholesale_quantity"),
            min_stock=data.get("min_stock"),
            sku=data.get("sku"),
        )
