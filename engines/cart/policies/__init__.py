"""
Cart Engine — Policies
========================
Stock validation and input policies for cart mutations.

Policies are pure: they inspect values and return either None
(pass) or a RejectionReason. They never mutate and never raise
for business conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.config.rules import StockPolicy
from core.primitives.item import Product


# ══════════════════════════════════════════════════════════════
# STOCK VALIDATOR
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StockCheck:
    valid: bool
    message: Optional[str] = None


def validate_stock(
    available: int,
    requested: int,
    policy: StockPolicy,
) -> StockCheck:
    """Check a requested quantity against available stock."""
    if policy.allow_negative_stock or requested <= available:
        return StockCheck(valid=True)
    return StockCheck(
        valid=False,
        message=f"Only {max(available, 0)} units available.",
    )


def stock_available_policy(
    product: Product,
    requested: int,
    policy: StockPolicy,
) -> Optional[RejectionReason]:
    """Reject a cart quantity that the product's stock cannot cover."""
    check = validate_stock(product.stock_quantity, requested, policy)
    if check.valid:
        return None
    return RejectionReason(
        code=ReasonCode.INSUFFICIENT_STOCK,
        message=f"Insufficient stock for '{product.name or product.product_id}'. {check.message}",
        policy_name="stock_available_policy",
    )


def quantity_must_be_integer_policy(quantity) -> Optional[RejectionReason]:
    """Reject anything that is not a plain int (bool included)."""
    if isinstance(quantity, int) and not isinstance(quantity, bool):
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_QUANTITY,
        message=f"Quantity must be an integer, got {quantity!r}.",
        policy_name="quantity_must_be_integer_policy",
    )


def quantity_must_be_positive_policy(quantity: int) -> Optional[RejectionReason]:
    if quantity_must_be_integer_policy(quantity) is None and quantity > 0:
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_QUANTITY,
        message=f"Quantity must be a positive integer, got {quantity!r}.",
        policy_name="quantity_must_be_positive_policy",
    )


# ══════════════════════════════════════════════════════════════
# STOCK LEVEL CLASSIFICATION
# ══════════════════════════════════════════════════════════════

class StockLevel(Enum):
    OK = "OK"
    LOW = "LOW"
    CRITICAL = "CRITICAL"
    OUT_OF_STOCK = "OUT_OF_STOCK"


def classify_stock_level(
    stock: int,
    policy: StockPolicy,
    min_stock: Optional[int] = None,
) -> StockLevel:
    """
    Warning level for an on-hand quantity.

    A product-level min_stock replaces the policy warning threshold;
    the critical threshold always comes from the policy.
    """
    if stock <= 0:
        return StockLevel.OUT_OF_STOCK
    if stock <= policy.critical_threshold:
        return StockLevel.CRITICAL
    warning = min_stock if min_stock is not None else policy.warning_threshold
    if stock <= warning:
        return StockLevel.LOW
    return StockLevel.OK
