"""
Cart Engine — Store Snapshot & Reducers
=========================================
The cart is an immutable snapshot. Every mutation is a pure reducer:

    (snapshot, command, context, policy) → CartTransition(snapshot, outcome)

RULES (NON-NEGOTIABLE):
- Exactly one line per product_id
- quantity is always a positive integer; reaching <= 0 removes the line
- total == round2(price × quantity) on every line
- line quantity never exceeds stock unless the policy allows negative stock
- a REJECTED transition returns the very same snapshot object
- reducers never raise for business conditions

This module does NOT:
- Notify anyone (see engines.cart.events)
- Hold state between calls (see engines.cart.services)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterator, Optional, Tuple

from core.commands.outcomes import CommandOutcome
from core.commands.rejection import ReasonCode, RejectionReason
from core.config.rules import StockPolicy
from core.primitives.item import Product
from core.primitives.party import Customer
from engines.cart.commands import (
    CART_CLEAR_REQUEST,
    CART_ITEM_ADD_REQUEST,
    CART_ITEM_REMOVE_REQUEST,
    CART_ITEM_UPDATE_QUANTITY_REQUEST,
    CART_ITEMS_REPLACE_REQUEST,
    AddToCartRequest,
    ClearCartRequest,
    RemoveFromCartRequest,
    ReplaceCartItemsRequest,
    UpdateQuantityRequest,
)
from engines.cart.policies import (
    quantity_must_be_integer_policy,
    quantity_must_be_positive_policy,
    stock_available_policy,
)
from engines.cart.pricing import line_total, price_line

logger = logging.getLogger("cart.store")


# ══════════════════════════════════════════════════════════════
# VALUE TYPES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CartLineItem:
    """
    One cart entry for a single product.

    product is the catalog snapshot the line was last priced
    or validated against.
    """

    product_id: str
    name: str
    price: float
    discount: float
    quantity: int
    total: float
    product: Product

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": self.price,
            "discount": self.discount,
            "quantity": self.quantity,
            "total": self.total,
        }


@dataclass(frozen=True)
class CartSnapshot:
    """Ordered, immutable set of cart lines."""

    items: Tuple[CartLineItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(self.items)

    def get(self, product_id: str) -> Optional[CartLineItem]:
        for line in self.items:
            if line.product_id == product_id:
                return line
        return None

    def __contains__(self, product_id) -> bool:
        return self.get(product_id) is not None

    @property
    def product_ids(self) -> Tuple[str, ...]:
        return tuple(line.product_id for line in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def upsert(self, line: CartLineItem) -> CartSnapshot:
        """Replace in place if present, append otherwise."""
        if line.product_id in self:
            return CartSnapshot(items=tuple(
                line if existing.product_id == line.product_id else existing
                for existing in self.items
            ))
        return CartSnapshot(items=self.items + (line,))

    def without(self, product_id: str) -> CartSnapshot:
        return CartSnapshot(items=tuple(
            line for line in self.items if line.product_id != product_id
        ))


EMPTY_CART = CartSnapshot()


@dataclass(frozen=True)
class PricingContext:
    """Everything that determines the derived price of every line."""

    customer: Optional[Customer] = None
    wholesale_mode: bool = False
    catalog: Tuple[Product, ...] = ()

    def find_product(self, product_id: str) -> Optional[Product]:
        for product in self.catalog:
            if product.product_id == product_id:
                return product
        return None


@dataclass(frozen=True)
class CartTransition:
    snapshot: CartSnapshot
    outcome: CommandOutcome


# ══════════════════════════════════════════════════════════════
# LINE CONSTRUCTION
# ══════════════════════════════════════════════════════════════

def build_line(
    product: Product,
    quantity: int,
    context: PricingContext,
) -> CartLineItem:
    """Price a product at a quantity under the given context."""
    quote = price_line(product, quantity, context.customer, context.wholesale_mode)
    return CartLineItem(
        product_id=product.product_id,
        name=product.name,
        price=quote.unit_price,
        discount=quote.unit_discount,
        quantity=quantity,
        total=line_total(quote.unit_price, quantity),
        product=product,
    )


def reprice_line(line: CartLineItem, product: Product, context: PricingContext) -> CartLineItem:
    """Re-derive price, discount and total; quantity and product are kept."""
    quote = price_line(product, line.quantity, context.customer, context.wholesale_mode)
    total = line_total(quote.unit_price, line.quantity)
    if (quote.unit_price == line.price and quote.unit_discount == line.discount
            and total == line.total):
        return line
    return replace(line, price=quote.unit_price, discount=quote.unit_discount, total=total)


# ══════════════════════════════════════════════════════════════
# REDUCERS
# ══════════════════════════════════════════════════════════════

def add_to_cart(
    snapshot: CartSnapshot,
    command: AddToCartRequest,
    context: PricingContext,
    policy: StockPolicy,
) -> CartTransition:
    product = command.product

    rejection = quantity_must_be_positive_policy(command.quantity)
    if rejection is not None:
        return _rejected(snapshot, command.command_type, rejection)

    existing = snapshot.get(product.product_id)
    candidate = command.quantity + (existing.quantity if existing else 0)

    # Validate the merged quantity before touching the snapshot.
    rejection = stock_available_policy(product, candidate, policy)
    if rejection is not None:
        return _rejected(snapshot, command.command_type, rejection)

    line = build_line(product, candidate, context)
    logger.info(
        f"Cart line {product.product_id} set to {candidate} "
        f"@ {line.price} (total {line.total})"
    )
    return CartTransition(
        snapshot=snapshot.upsert(line),
        outcome=CommandOutcome.accepted(command.command_type),
    )


def update_quantity(
    snapshot: CartSnapshot,
    command: UpdateQuantityRequest,
    context: PricingContext,
    policy: StockPolicy,
) -> CartTransition:
    rejection = quantity_must_be_integer_policy(command.quantity)
    if rejection is not None:
        return _rejected(snapshot, command.command_type, rejection)

    if command.quantity <= 0:
        return remove_from_cart(
            snapshot,
            RemoveFromCartRequest(product_id=command.product_id),
            context,
            policy,
            command_type=command.command_type,
        )

    existing = snapshot.get(command.product_id)
    if existing is None:
        logger.debug(f"Update of {command.product_id} ignored: not in cart")
        return CartTransition(
            snapshot=snapshot,
            outcome=CommandOutcome.accepted(command.command_type),
        )

    product = context.find_product(command.product_id) or existing.product

    rejection = stock_available_policy(product, command.quantity, policy)
    if rejection is not None:
        return _rejected(snapshot, command.command_type, rejection)

    line = build_line(product, command.quantity, context)
    logger.info(f"Cart line {command.product_id} updated to {command.quantity}")
    return CartTransition(
        snapshot=snapshot.upsert(line),
        outcome=CommandOutcome.accepted(command.command_type),
    )


def remove_from_cart(
    snapshot: CartSnapshot,
    command: RemoveFromCartRequest,
    context: PricingContext,
    policy: StockPolicy,
    command_type: Optional[str] = None,
) -> CartTransition:
    outcome = CommandOutcome.accepted(command_type or command.command_type)
    if command.product_id not in snapshot:
        logger.debug(f"Remove of {command.product_id} ignored: not in cart")
        return CartTransition(snapshot=snapshot, outcome=outcome)
    logger.info(f"Cart line {command.product_id} removed")
    return CartTransition(snapshot=snapshot.without(command.product_id), outcome=outcome)


def clear_cart(
    snapshot: CartSnapshot,
    command: ClearCartRequest,
    context: PricingContext,
    policy: StockPolicy,
) -> CartTransition:
    outcome = CommandOutcome.accepted(command.command_type)
    if snapshot.is_empty:
        return CartTransition(snapshot=snapshot, outcome=outcome)
    logger.info(f"Cart cleared ({len(snapshot)} lines)")
    return CartTransition(snapshot=EMPTY_CART, outcome=outcome)


def set_cart_items(
    snapshot: CartSnapshot,
    command: ReplaceCartItemsRequest,
    context: PricingContext,
    policy: StockPolicy,
) -> CartTransition:
    """
    Escape hatch: replace every line as given.

    Nothing is validated or re-priced here; callers are expected to
    run a recalculation pass before trusting the result for display.
    """
    logger.info(f"Cart items replaced ({len(command.items)} lines)")
    return CartTransition(
        snapshot=CartSnapshot(items=tuple(command.items)),
        outcome=CommandOutcome.accepted(command.command_type),
    )


# ══════════════════════════════════════════════════════════════
# DISPATCH
# ══════════════════════════════════════════════════════════════

REDUCERS = {
    CART_ITEM_ADD_REQUEST: add_to_cart,
    CART_ITEM_UPDATE_QUANTITY_REQUEST: update_quantity,
    CART_ITEM_REMOVE_REQUEST: remove_from_cart,
    CART_CLEAR_REQUEST: clear_cart,
    CART_ITEMS_REPLACE_REQUEST: set_cart_items,
}


def dispatch(
    snapshot: CartSnapshot,
    command,
    context: PricingContext,
    policy: StockPolicy,
) -> CartTransition:
    """Route a cart request to its reducer by command_type."""
    command_type = getattr(command, "command_type", None) or "cart.unknown.request"
    reducer = REDUCERS.get(command_type)
    if reducer is None:
        return _rejected(snapshot, command_type, RejectionReason(
            code=ReasonCode.UNKNOWN_COMMAND,
            message=f"Unknown cart command: {command_type}",
            policy_name="dispatch",
        ))
    return reducer(snapshot, command, context, policy)


def _rejected(
    snapshot: CartSnapshot,
    command_type: str,
    reason: RejectionReason,
) -> CartTransition:
    logger.info(f"Cart command {command_type} REJECTED: {reason.code}: {reason.message}")
    return CartTransition(
        snapshot=snapshot,
        outcome=CommandOutcome.rejected(command_type, reason),
    )
