"""
Cart Engine — Request Commands
================================
Typed cart requests. Each request is a frozen declaration of intent
that the store reducers turn into a new snapshot plus an outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from core.primitives.item import Product


# ══════════════════════════════════════════════════════════════
# COMMAND TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

CART_ITEM_ADD_REQUEST = "cart.item.add.request"
CART_ITEM_UPDATE_QUANTITY_REQUEST = "cart.item.update_quantity.request"
CART_ITEM_REMOVE_REQUEST = "cart.item.remove.request"
CART_CLEAR_REQUEST = "cart.clear.request"
CART_ITEMS_REPLACE_REQUEST = "cart.items.replace.request"
CART_DISCOUNT_SET_REQUEST = "cart.discount.set.request"


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AddToCartRequest:
    """Add a product, merging with an existing line."""
    product: Product
    quantity: int = 1
    command_type: str = CART_ITEM_ADD_REQUEST

    def __post_init__(self):
        if not isinstance(self.product, Product):
            raise ValueError("product must be a Product snapshot.")


@dataclass(frozen=True)
class UpdateQuantityRequest:
    """Set a line's quantity; <= 0 means remove."""
    product_id: str
    quantity: int
    command_type: str = CART_ITEM_UPDATE_QUANTITY_REQUEST


@dataclass(frozen=True)
class RemoveFromCartRequest:
    product_id: str
    command_type: str = CART_ITEM_REMOVE_REQUEST


@dataclass(frozen=True)
class ClearCartRequest:
    command_type: str = CART_CLEAR_REQUEST


@dataclass(frozen=True)
class ReplaceCartItemsRequest:
    """Bulk replace (draft restore). Nothing is re-validated."""
    items: Tuple = ()
    command_type: str = CART_ITEMS_REPLACE_REQUEST

