"""
Cart Engine — Pricing Policy & Stock Validator Tests
======================================================
Tests verify:
- Retail / wholesale tier selection
- Minimum wholesale quantity rules (product and customer)
- Wholesale customer discount
- Two-decimal rounding of every derived amount
- Stock validation and stock level classification
"""

import pytest

from core.commands.rejection import ReasonCode
from core.config.rules import StockPolicy
from core.primitives.item import Product
from core.primitives.party import Customer, CustomerType
from engines.cart.policies import (
    StockLevel,
    classify_stock_level,
    quantity_must_be_integer_policy,
    quantity_must_be_positive_policy,
    stock_available_policy,
    validate_stock,
)
from engines.cart.pricing import (
    PriceQuote,
    is_wholesale_eligible,
    line_total,
    price_line,
    wholesale_threshold,
)


def make_product(**overrides) -> Product:
    fields = dict(
        product_id="prod-1",
        name="Shampoo Test",
        retail_price=100.0,
        stock_quantity=50,
        wholesale_price=80.0,
    )
    fields.update(overrides)
    return Product(**fields)


WHOLESALE_10 = Customer(
    customer_id="cust-1",
    name="Salon Bella",
    customer_type=CustomerType.WHOLESALE,
    wholesale_discount=10,
)


# ══════════════════════════════════════════════════════════════
# WHOLESALE ELIGIBILITY
# ══════════════════════════════════════════════════════════════

class TestWholesaleEligibility:
    def test_mode_off_uses_retail(self):
        assert price_line(make_product(), 1, None, False) == PriceQuote(100.0, 0.0)

    def test_mode_on_without_threshold_uses_wholesale(self):
        assert price_line(make_product(), 1, None, True).unit_price == 80.0

    def test_missing_wholesale_price_ignores_tier(self):
        product = make_product(wholesale_price=None)
        assert price_line(product, 100, None, True).unit_price == 100.0

    def test_zero_wholesale_price_ignores_tier(self):
        product = make_product(wholesale_price=0)
        assert price_line(product, 100, None, True).unit_price == 100.0

    def test_product_threshold_not_met(self):
        product = make_product(min_wholesale_quantity=10)
        assert price_line(product, 9, None, True).unit_price == 100.0

    def test_product_threshold_met(self):
        product = make_product(min_wholesale_quantity=10)
        assert price_line(product, 10, None, True).unit_price == 80.0

    def test_customer_threshold_raises_product_threshold(self):
        product = make_product(min_wholesale_quantity=10)
        customer = Customer(customer_id="c", min_wholesale_quantity=20)
        assert wholesale_threshold(product, customer) == 20
        assert not is_wholesale_eligible(product, 15, customer, True)
        assert is_wholesale_eligible(product, 20, customer, True)

    def test_customer_threshold_ignored_when_product_has_none(self):
        customer = Customer(customer_id="c", min_wholesale_quantity=20)
        assert is_wholesale_eligible(make_product(), 1, customer, True)

    def test_zero_product_threshold_counts_as_unset(self):
        product = make_product(min_wholesale_quantity=0)
        assert is_wholesale_eligible(product, 1, None, True)


# ══════════════════════════════════════════════════════════════
# CUSTOMER DISCOUNT
# ══════════════════════════════════════════════════════════════

class TestCustomerDiscount:
    def test_wholesale_customer_discount_on_retail(self):
        quote = price_line(make_product(), 1, WHOLESALE_10, False)
        assert quote.unit_price == 90.0
        assert quote.unit_discount == 10.0

    def test_discount_stacks_on_wholesale_tier(self):
        quote = price_line(make_product(), 1, WHOLESALE_10, True)
        assert quote.unit_price == 72.0
        assert quote.unit_discount == 8.0

    def test_retail_customer_gets_no_discount(self):
        customer = Customer(customer_id="c", customer_type=CustomerType.RETAIL,
                            wholesale_discount=10)
        assert price_line(make_product(), 1, customer, False) == PriceQuote(100.0, 0.0)

    def test_zero_discount_is_no_discount(self):
        customer = Customer(customer_id="c", customer_type=CustomerType.WHOLESALE,
                            wholesale_discount=0)
        assert price_line(make_product(), 1, customer, False) == PriceQuote(100.0, 0.0)

    def test_discount_is_rounded(self):
        product = make_product(retail_price=33.33, wholesale_price=None)
        quote = price_line(product, 1, WHOLESALE_10, False)
        assert quote.unit_price == 30.0
        assert quote.unit_discount == 3.33

    def test_pure_and_deterministic(self):
        product = make_product(min_wholesale_quantity=5)
        first = price_line(product, 7, WHOLESALE_10, True)
        second = price_line(product, 7, WHOLESALE_10, True)
        assert first == second


class TestLineTotal:
    @pytest.mark.parametrize("price, qty, expected", [
        (100.0, 2, 200.0),
        (0.1, 3, 0.3),
        (19.99, 3, 59.97),
        (33.33, 3, 99.99),
    ])
    def test_rounded(self, price, qty, expected):
        assert line_total(price, qty) == expected


# ══════════════════════════════════════════════════════════════
# STOCK VALIDATOR
# ══════════════════════════════════════════════════════════════

class TestStockValidator:
    def test_within_stock(self):
        assert validate_stock(10, 10, StockPolicy()).valid is True

    def test_exceeds_stock(self):
        check = validate_stock(10, 11, StockPolicy())
        assert check.valid is False
        assert "10" in check.message

    def test_negative_stock_allowed(self):
        policy = StockPolicy(allow_negative_stock=True)
        assert validate_stock(0, 500, policy).valid is True

    def test_policy_returns_rejection(self):
        reason = stock_available_policy(make_product(stock_quantity=2), 5, StockPolicy())
        assert reason.code == ReasonCode.INSUFFICIENT_STOCK
        assert reason.policy_name == "stock_available_policy"
        assert "Only 2 units available" in reason.message

    def test_policy_passes(self):
        assert stock_available_policy(make_product(), 50, StockPolicy()) is None

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True, "2"])
    def test_quantity_must_be_positive(self, quantity):
        reason = quantity_must_be_positive_policy(quantity)
        assert reason.code == ReasonCode.INVALID_QUANTITY

    def test_positive_quantity_passes(self):
        assert quantity_must_be_positive_policy(3) is None

    @pytest.mark.parametrize("quantity", [2.5, None, "3", False])
    def test_quantity_must_be_integer(self, quantity):
        reason = quantity_must_be_integer_policy(quantity)
        assert reason.code == ReasonCode.INVALID_QUANTITY
        assert reason.policy_name == "quantity_must_be_integer_policy"

    def test_zero_and_negative_are_integers(self):
        assert quantity_must_be_integer_policy(0) is None
        assert quantity_must_be_integer_policy(-4) is None


class TestStockLevel:
    POLICY = StockPolicy(warning_threshold=10, critical_threshold=5)

    @pytest.mark.parametrize("stock, expected", [
        (0, StockLevel.OUT_OF_STOCK),
        (-3, StockLevel.OUT_OF_STOCK),
        (5, StockLevel.CRITICAL),
        (6, StockLevel.LOW),
        (10, StockLevel.LOW),
        (11, StockLevel.OK),
    ])
    def test_policy_thresholds(self, stock, expected):
        assert classify_stock_level(stock, self.POLICY) == expected

    def test_product_min_stock_overrides_warning(self):
        assert classify_stock_level(15, self.POLICY, min_stock=20) == StockLevel.LOW
        assert classify_stock_level(8, self.POLICY, min_stock=7) == StockLevel.OK
