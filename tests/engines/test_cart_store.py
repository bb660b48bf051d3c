"""
Cart Engine — Store Reducer & Recalculation Tests
===================================================
Tests verify:
- add / update / remove / clear semantics and their edge cases
- Rejected commands leave the snapshot object untouched
- One line per product, positive quantities, total == round2(price × qty)
- Recalculation keeps quantities and order, and skips no-op replacements
- Lines whose product left the catalog are preserved as they were
"""

import pytest

from core.commands.rejection import ReasonCode
from core.config.rules import StockPolicy
from core.primitives.item import Product
from core.primitives.money import round2
from core.primitives.party import Customer, CustomerType
from engines.cart.commands import (
    CART_ITEM_UPDATE_QUANTITY_REQUEST,
    AddToCartRequest,
    ClearCartRequest,
    RemoveFromCartRequest,
    ReplaceCartItemsRequest,
    UpdateQuantityRequest,
)
from engines.cart.recalculation import recalculate
from engines.cart.store import (
    EMPTY_CART,
    CartSnapshot,
    PricingContext,
    build_line,
    dispatch,
)

POLICY = StockPolicy()

PRODUCT_A = Product(product_id="A", name="Product A", retail_price=100.0, stock_quantity=10)
PRODUCT_B = Product(
    product_id="B", name="Product B", retail_price=120.0, stock_quantity=30,
    wholesale_price=90.0,
)
CATALOG = (PRODUCT_A, PRODUCT_B)
RETAIL = PricingContext(catalog=CATALOG)


class Cart:
    """Tiny driver threading snapshots through the reducers."""

    def __init__(self, context=RETAIL, policy=POLICY):
        self.snapshot = EMPTY_CART
        self.context = context
        self.policy = policy
        self.outcomes = []

    def send(self, command):
        transition = dispatch(self.snapshot, command, self.context, self.policy)
        self.snapshot = transition.snapshot
        self.outcomes.append(transition.outcome)
        return transition

    def add(self, product, quantity=1):
        return self.send(AddToCartRequest(product=product, quantity=quantity))

    def update(self, product_id, quantity):
        return self.send(UpdateQuantityRequest(product_id=product_id, quantity=quantity))

    def remove(self, product_id):
        return self.send(RemoveFromCartRequest(product_id=product_id))


def assert_invariants(snapshot: CartSnapshot, policy=POLICY):
    ids = snapshot.product_ids
    assert len(ids) == len(set(ids))
    for line in snapshot:
        assert isinstance(line.quantity, int) and line.quantity > 0
        assert abs(line.total - round2(line.price * line.quantity)) < 0.01
        if not policy.allow_negative_stock:
            assert line.quantity <= line.product.stock_quantity


# ══════════════════════════════════════════════════════════════
# ADD TO CART
# ══════════════════════════════════════════════════════════════

class TestAddToCart:
    def test_reference_scenario(self):
        cart = Cart()
        cart.add(PRODUCT_A, 2)
        line = cart.snapshot.get("A")
        assert (line.quantity, line.total) == (2, 200.0)

        cart.add(PRODUCT_A, 3)
        assert len(cart.snapshot) == 1
        assert cart.snapshot.get("A").quantity == 5
        assert cart.snapshot.get("A").total == 500.0

        transition = cart.update("A", 100)
        assert transition.outcome.is_rejected
        assert cart.snapshot.get("A").quantity == 5

        cart.update("A", 0)
        assert cart.snapshot.is_empty

    def test_default_quantity_is_one(self):
        cart = Cart()
        cart.add(PRODUCT_A)
        assert cart.snapshot.get("A").quantity == 1

    def test_add_to_empty_cart_grows_by_one(self):
        for product in CATALOG:
            cart = Cart()
            cart.add(product)
            assert len(cart.snapshot) == 1

    def test_insufficient_stock_rejected_without_mutation(self):
        cart = Cart()
        before = cart.snapshot
        transition = cart.add(PRODUCT_A, 11)
        assert transition.outcome.is_rejected
        assert transition.outcome.reason.code == ReasonCode.INSUFFICIENT_STOCK
        assert transition.snapshot is before

    def test_merged_quantity_is_validated(self):
        cart = Cart()
        cart.add(PRODUCT_A, 8)
        before = cart.snapshot
        transition = cart.add(PRODUCT_A, 3)
        assert transition.outcome.is_rejected
        assert transition.snapshot is before
        assert cart.snapshot.get("A").quantity == 8

    def test_negative_stock_policy_allows_overselling(self):
        policy = StockPolicy(allow_negative_stock=True)
        cart = Cart(policy=policy)
        cart.add(PRODUCT_A, 25)
        assert cart.snapshot.get("A").quantity == 25
        assert_invariants(cart.snapshot, policy)

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_rejected(self, quantity):
        cart = Cart()
        transition = cart.add(PRODUCT_A, quantity)
        assert transition.outcome.reason.code == ReasonCode.INVALID_QUANTITY
        assert cart.snapshot.is_empty

    def test_new_lines_append_existing_keep_position(self):
        cart = Cart()
        cart.add(PRODUCT_A)
        cart.add(PRODUCT_B)
        cart.add(PRODUCT_A)
        assert cart.snapshot.product_ids == ("A", "B")

    def test_merge_reprices_for_new_quantity(self):
        product = Product(
            product_id="W", name="Bulk", retail_price=10.0, stock_quantity=100,
            wholesale_price=8.0, min_wholesale_quantity=10,
        )
        cart = Cart(context=PricingContext(wholesale_mode=True, catalog=(product,)))
        cart.add(product, 6)
        assert cart.snapshot.get("W").price == 10.0
        cart.add(product, 4)
        line = cart.snapshot.get("W")
        assert (line.price, line.total) == (8.0, 80.0)

    def test_repeated_adds_never_duplicate(self):
        cart = Cart()
        for _ in range(10):
            cart.add(PRODUCT_B, 2)
        assert len(cart.snapshot) == 1
        assert cart.snapshot.get("B").quantity == 20
        assert_invariants(cart.snapshot)


# ══════════════════════════════════════════════════════════════
# UPDATE / REMOVE / CLEAR
# ══════════════════════════════════════════════════════════════

class TestUpdateQuantity:
    def test_update_reprices(self):
        cart = Cart()
        cart.add(PRODUCT_A, 2)
        cart.update("A", 7)
        line = cart.snapshot.get("A")
        assert (line.quantity, line.total) == (7, 700.0)

    def test_over_stock_is_rejected_not_clamped(self):
        cart = Cart()
        cart.add(PRODUCT_A, 4)
        before = cart.snapshot
        transition = cart.update("A", 11)
        assert transition.outcome.is_rejected
        assert transition.snapshot is before

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_non_positive_removes(self, quantity):
        cart = Cart()
        cart.add(PRODUCT_A, 2)
        transition = cart.update("A", quantity)
        assert transition.outcome.is_accepted
        assert transition.outcome.command_type == CART_ITEM_UPDATE_QUANTITY_REQUEST
        assert "A" not in cart.snapshot

    def test_removal_by_zero_is_idempotent(self):
        cart = Cart()
        cart.add(PRODUCT_A)
        cart.add(PRODUCT_B)
        cart.update("A", 0)
        after_first = cart.snapshot
        transition = cart.update("A", 0)
        assert transition.outcome.is_accepted
        assert transition.snapshot is after_first
        assert len(cart.snapshot) == 1

    def test_unknown_product_is_noop(self):
        cart = Cart()
        cart.add(PRODUCT_A)
        before = cart.snapshot
        transition = cart.update("missing", 3)
        assert transition.outcome.is_accepted
        assert transition.snapshot is before

    def test_validates_against_current_catalog_stock(self):
        cart = Cart()
        cart.add(PRODUCT_A, 2)
        restocked_down = Product(product_id="A", name="Product A",
                                 retail_price=100.0, stock_quantity=3)
        cart.context = PricingContext(catalog=(restocked_down,))
        assert cart.update("A", 4).outcome.is_rejected
        assert cart.update("A", 3).outcome.is_accepted
        assert cart.snapshot.get("A").product is restocked_down

    @pytest.mark.parametrize("quantity", [2.5, None, "3", True])
    def test_non_integer_quantity_rejected(self, quantity):
        cart = Cart()
        cart.add(PRODUCT_A, 2)
        before = cart.snapshot
        transition = cart.update("A", quantity)
        assert transition.outcome.is_rejected
        assert transition.outcome.reason.code == ReasonCode.INVALID_QUANTITY
        assert transition.snapshot is before
        assert cart.snapshot.get("A").quantity == 2
        assert_invariants(cart.snapshot)


class TestRemoveAndClear:
    def test_remove_only_target(self):
        cart = Cart()
        cart.add(PRODUCT_A, 2)
        cart.add(PRODUCT_B, 1)
        cart.remove("A")
        assert cart.snapshot.product_ids == ("B",)

    def test_remove_absent_is_noop(self):
        cart = Cart()
        cart.add(PRODUCT_A)
        before = cart.snapshot
        transition = cart.remove("nope")
        assert transition.outcome.is_accepted
        assert transition.snapshot is before

    def test_clear(self):
        cart = Cart()
        cart.add(PRODUCT_A)
        cart.add(PRODUCT_B)
        cart.send(ClearCartRequest())
        assert cart.snapshot.is_empty
        cart.send(ClearCartRequest())
        assert cart.snapshot.is_empty
        assert all(o.is_accepted for o in cart.outcomes)

    def test_replace_items_is_unvalidated(self):
        oversold = build_line(PRODUCT_A, 99, RETAIL)
        cart = Cart()
        cart.send(ReplaceCartItemsRequest(items=(oversold,)))
        assert cart.snapshot.get("A").quantity == 99

    def test_unknown_command_rejected(self):
        class Bogus:
            command_type = "cart.bogus.request"

        transition = dispatch(EMPTY_CART, Bogus(), RETAIL, POLICY)
        assert transition.outcome.reason.code == ReasonCode.UNKNOWN_COMMAND
        assert transition.snapshot is EMPTY_CART


# ══════════════════════════════════════════════════════════════
# RECALCULATION
# ══════════════════════════════════════════════════════════════

class TestRecalculation:
    def _cart(self):
        cart = Cart()
        cart.add(PRODUCT_A, 2)
        cart.add(PRODUCT_B, 3)
        return cart

    def test_wholesale_toggle_reprices_without_touching_quantities(self):
        cart = self._cart()
        result = recalculate(cart.snapshot, PricingContext(wholesale_mode=True, catalog=CATALOG))
        assert result.repriced == ("B",)
        assert result.snapshot.product_ids == ("A", "B")
        assert [line.quantity for line in result.snapshot] == [2, 3]
        assert result.snapshot.get("B").price == 90.0
        assert result.snapshot.get("B").total == 270.0
        assert result.snapshot.get("A") is cart.snapshot.get("A")

    def test_customer_change_applies_discount(self):
        cart = self._cart()
        customer = Customer(customer_id="c", customer_type=CustomerType.WHOLESALE,
                            wholesale_discount=10)
        result = recalculate(cart.snapshot, PricingContext(customer=customer, catalog=CATALOG))
        line = result.snapshot.get("A")
        assert (line.price, line.discount, line.total) == (90.0, 10.0, 180.0)
        assert_invariants(result.snapshot)

    def test_no_change_returns_same_snapshot(self):
        cart = self._cart()
        result = recalculate(cart.snapshot, RETAIL)
        assert result.snapshot is cart.snapshot
        assert not result.changed

    def test_catalog_price_change_is_picked_up(self):
        cart = self._cart()
        repriced_a = Product(product_id="A", name="Product A", retail_price=110.0,
                             stock_quantity=10)
        result = recalculate(cart.snapshot, PricingContext(catalog=(repriced_a, PRODUCT_B)))
        assert result.snapshot.get("A").total == 220.0

    def test_missing_product_line_is_left_untouched(self):
        cart = self._cart()
        only_b = PricingContext(wholesale_mode=True, catalog=(PRODUCT_B,))
        result = recalculate(cart.snapshot, only_b)
        assert result.missing == ("A",)
        assert result.snapshot.get("A") is cart.snapshot.get("A")
        assert result.snapshot.get("B").price == 90.0

    def test_repeated_passes_are_stable(self):
        cart = self._cart()
        context = PricingContext(wholesale_mode=True, catalog=CATALOG)
        first = recalculate(cart.snapshot, context)
        second = recalculate(first.snapshot, context)
        assert second.snapshot is first.snapshot
