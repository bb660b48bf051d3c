"""
Cart Engine — Application Service
===================================
Session-owned cart: holds the current snapshot and pricing context,
applies reducers, commits their result in a single assignment, and
forwards outcomes to the notification sink.

Flow per mutation:
    request → reducer(snapshot, request, context, policy)
            → commit transition.snapshot
            → notify (side channel, failures logged)
            → return CommandOutcome

Context changes (customer, wholesale mode, catalog) trigger exactly
one recalculation pass, committed the same way.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from core.commands.outcomes import CommandOutcome
from core.commands.rejection import ReasonCode, RejectionReason
from core.config.rules import ConfigStore, StockPolicy, TaxRule
from core.primitives.item import Product
from core.primitives.party import Customer
from engines.cart.commands import (
    CART_DISCOUNT_SET_REQUEST,
    AddToCartRequest,
    ClearCartRequest,
    RemoveFromCartRequest,
    ReplaceCartItemsRequest,
    UpdateQuantityRequest,
)
from engines.cart.discounts import (
    DiscountType,
    normalize_discount_input,
    resolve_discount_amount,
    validate_discount,
)
from engines.cart.drafts import CartDraft, build_draft
from engines.cart.events import Notification, NotificationSink, build_notification
from engines.cart.policies import StockLevel, classify_stock_level
from engines.cart.recalculation import RecalculationResult, recalculate
from engines.cart.store import (
    EMPTY_CART,
    CartLineItem,
    CartSnapshot,
    CartTransition,
    PricingContext,
    dispatch,
)
from engines.cart.totals import CartTotals, cart_subtotal, compute_totals

logger = logging.getLogger("cart.service")


class CartService:
    """Cart Engine application service — one instance per shopping session."""

    def __init__(
        self,
        *,
        stock_policy: Optional[StockPolicy] = None,
        tax_rule: Optional[TaxRule] = None,
        notification_sink: Optional[NotificationSink] = None,
        context: Optional[PricingContext] = None,
        snapshot: Optional[CartSnapshot] = None,
    ):
        self._stock_policy = stock_policy or StockPolicy()
        self._tax_rule = tax_rule or TaxRule()
        self._notification_sink = notification_sink
        self._context = context or PricingContext()
        self._snapshot = snapshot or EMPTY_CART
        self._discount = 0.0
        self._discount_type = DiscountType.FIXED_AMOUNT

    @classmethod
    def from_config(
        cls,
        config_store: ConfigStore,
        **kwargs,
    ) -> CartService:
        return cls(
            stock_policy=config_store.get_stock_policy(),
            tax_rule=config_store.get_tax_rule(),
            **kwargs,
        )

    # ── Read side ─────────────────────────────────────────────

    @property
    def snapshot(self) -> CartSnapshot:
        return self._snapshot

    @property
    def cart(self) -> Tuple[CartLineItem, ...]:
        return self._snapshot.items

    @property
    def context(self) -> PricingContext:
        return self._context

    @property
    def stock_policy(self) -> StockPolicy:
        return self._stock_policy

    @property
    def discount(self) -> Tuple[float, DiscountType]:
        return self._discount, self._discount_type

    @property
    def cart_totals(self) -> CartTotals:
        """Recomputed from the current snapshot on every access."""
        items = self._snapshot.items
        flat = resolve_discount_amount(
            self._discount, self._discount_type, cart_subtotal(items),
        )
        return compute_totals(items, flat, self._tax_rule)

    def low_stock_lines(self) -> List[Tuple[CartLineItem, StockLevel]]:
        """Cart lines whose current catalog product is LOW or worse."""
        flagged = []
        for line in self._snapshot:
            product = self._context.find_product(line.product_id) or line.product
            level = classify_stock_level(
                product.stock_quantity, self._stock_policy, product.min_stock,
            )
            if level != StockLevel.OK:
                flagged.append((line, level))
        return flagged

    # ── Mutations ─────────────────────────────────────────────

    def add_to_cart(self, product: Product, quantity: int = 1) -> CommandOutcome:
        return self._apply(
            AddToCartRequest(product=product, quantity=quantity),
            subject=product.name or product.product_id,
        )

    def update_quantity(self, product_id: str, quantity: int) -> CommandOutcome:
        return self._apply(
            UpdateQuantityRequest(product_id=product_id, quantity=quantity),
            subject=product_id,
        )

    def remove_from_cart(self, product_id: str) -> CommandOutcome:
        return self._apply(
            RemoveFromCartRequest(product_id=product_id),
            subject=product_id,
        )

    def clear_cart(self) -> CommandOutcome:
        return self._apply(ClearCartRequest())

    def set_cart_items(self, items: Iterable[CartLineItem]) -> CommandOutcome:
        """Bulk replace without validation; follow with recalculate()."""
        return self._apply(ReplaceCartItemsRequest(items=tuple(items)))

    def set_discount(
        self,
        value,
        discount_type: DiscountType = DiscountType.FIXED_AMOUNT,
    ) -> CommandOutcome:
        """
        Set the flat cart discount.

        Invalid input is REJECTED and the previous discount stays in place.
        """
        amount = normalize_discount_input(value)
        errors = validate_discount(
            amount, discount_type, cart_subtotal(self._snapshot.items),
        )
        if errors:
            outcome = CommandOutcome.rejected(
                CART_DISCOUNT_SET_REQUEST,
                RejectionReason(
                    code=ReasonCode.INVALID_DISCOUNT,
                    message=" ".join(errors),
                    policy_name="validate_discount",
                ),
            )
        else:
            self._discount = amount
            self._discount_type = discount_type
            outcome = CommandOutcome.accepted(CART_DISCOUNT_SET_REQUEST)
        self._notify(outcome)
        return outcome

    # ── Pricing context ───────────────────────────────────────

    def on_context_change(
        self,
        customer: Optional[Customer],
        wholesale_mode: bool,
        catalog: Iterable[Product],
    ) -> RecalculationResult:
        self._context = PricingContext(
            customer=customer,
            wholesale_mode=wholesale_mode,
            catalog=tuple(catalog),
        )
        return self.recalculate()

    def recalculate(self) -> RecalculationResult:
        """One recalculation pass against the current context."""
        result = recalculate(self._snapshot, self._context)
        self._snapshot = result.snapshot
        return result

    # ── Drafts ────────────────────────────────────────────────

    def save_draft(self, notes: str = "") -> CartDraft:
        customer = self._context.customer
        return build_draft(
            self._snapshot,
            discount=self._discount,
            discount_type=self._discount_type,
            notes=notes,
            wholesale_mode=self._context.wholesale_mode,
            customer_id=customer.customer_id if customer else None,
        )

    def restore_draft(
        self,
        draft: CartDraft,
        catalog: Iterable[Product],
        customers: Iterable[Customer] = (),
    ) -> List[CommandOutcome]:
        """
        Rebuild the cart from a draft against the current catalog.

        Each line is re-added through the add reducer, so stock is checked
        and prices are derived fresh. Lines whose product is no longer
        in the catalog are skipped. Only rejected lines reach the
        notification sink.
        """
        customer = None
        if draft.customer_id is not None:
            customer = next(
                (c for c in customers if c.customer_id == draft.customer_id),
                None,
            )
            if customer is None:
                logger.warning(
                    f"Draft customer {draft.customer_id} not found; "
                    f"restoring without customer"
                )

        if not self._snapshot.is_empty:
            logger.info(f"Cart cleared for draft restore ({len(self._snapshot)} lines)")
        self._snapshot = EMPTY_CART
        self.on_context_change(customer, draft.wholesale_mode, catalog)

        outcomes = []
        for line in draft.lines:
            product = self._context.find_product(line.product_id)
            if product is None:
                logger.warning(
                    f"Draft line {line.product_id} skipped: not in catalog"
                )
                continue
            outcomes.append(self._apply(
                AddToCartRequest(product=product, quantity=line.quantity),
                subject=product.name or product.product_id,
                quiet=True,
            ))

        self._discount = 0.0
        self._discount_type = DiscountType.FIXED_AMOUNT
        self.set_discount(draft.discount, draft.discount_type)
        return outcomes

    # ── Internals ─────────────────────────────────────────────

    def _apply(self, command, subject: str = "", quiet: bool = False) -> CommandOutcome:
        transition: CartTransition = dispatch(
            self._snapshot, command, self._context, self._stock_policy,
        )
        self._snapshot = transition.snapshot
        if not (quiet and transition.outcome.is_accepted):
            self._notify(transition.outcome, subject)
        return transition.outcome

    def _notify(self, outcome: CommandOutcome, subject: str = "") -> None:
        if self._notification_sink is None:
            return
        notification: Optional[Notification] = build_notification(outcome, subject)
        if notification is None:
            return
        try:
            self._notification_sink(notification)
        except Exception as exc:
            logger.error(
                f"Notification sink failed for {outcome.command_type}: {exc}",
                exc_info=True,
            )
