"""Tests for billing/cart.py - cart totals, global discount, Cart."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from billing.cart import (
    Cart,
    calculate_totals,
    apply_global_discount,
    resolve_global_discount,
    line_net,
    line_tax,
    line_total,
)
from billing.exceptions import PricingValidationError, LineItemNotFoundError
from billing.models import (
    LineItem, Totals, GlobalDiscount, DiscountKind, GlobalDiscountMode,
)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def consult():
    """Two units at 500, 10% off, 5% tax."""
    return LineItem(id="SVC-1", unit_price_paise=500, qty=2, discount_pct=10, tax_pct=5)


@pytest.fixture
def consult_totals(consult):
    return calculate_totals([consult])


# =============================================================================
# LINE HELPERS
# =============================================================================


class TestLineHelpers:
    """Tests for per-line amounts."""

    def test_line_net(self, consult):
        assert line_net(consult) == Decimal(900)

    def test_line_tax(self, consult):
        assert line_tax(consult) == Decimal(45)

    def test_line_total(self, consult):
        assert line_total(consult) == Decimal(945)

    def test_amounts_are_unrounded(self):
        item = LineItem(id="X", unit_price_paise=333, discount_pct=10)
        assert line_net(item) == Decimal("299.7")


# =============================================================================
# CALCULATE TOTALS
# =============================================================================


class TestCalculateTotals:
    """Tests for calculate_totals()."""

    def test_single_line(self, consult_totals):
        assert consult_totals == Totals(
            subtotal_paise=900,
            discount_total_paise=100,
            tax_total_paise=45,
            net_payable_paise=945,
        )

    def test_empty_cart_is_all_zero(self):
        assert calculate_totals([]) == Totals(
            subtotal_paise=0, discount_total_paise=0, tax_total_paise=0, net_payable_paise=0,
        )

    def test_base_charge_only(self):
        """A pure room charge cart is valid."""
        totals = calculate_totals([], base_charge_paise=350000)
        assert totals.subtotal_paise == 350000
        assert totals.discount_total_paise == 0
        assert totals.tax_total_paise == 0
        assert totals.net_payable_paise == 350000

    def test_base_charge_is_neither_discounted_nor_taxed(self, consult):
        totals = calculate_totals([consult], base_charge_paise=1000)
        assert totals.subtotal_paise == 1900
        assert totals.discount_total_paise == 100
        assert totals.tax_total_paise == 45
        assert totals.net_payable_paise == 1945

    def test_rounds_once_at_the_end(self):
        """Three lines of 0.5 tax each: 1.5 rounds to 2, not 1 + 1 + 1."""
        items = [
            LineItem(id=f"L{i}", unit_price_paise=1, tax_pct=50)
            for i in range(3)
        ]
        totals = calculate_totals(items)
        assert totals.subtotal_paise == 3
        assert totals.tax_total_paise == 2
        assert totals.net_payable_paise == 5  # 4.5

    def test_fractional_discounts_accumulate_exactly(self):
        """33.3 + 33.3 = 66.6 -> 67; subtotal 599.4 -> 599."""
        items = [
            LineItem(id="A", unit_price_paise=333, discount_pct=10),
            LineItem(id="B", unit_price_paise=333, discount_pct=10),
        ]
        totals = calculate_totals(items)
        assert totals.discount_total_paise == 67
        assert totals.subtotal_paise == 599

    def test_order_does_not_matter(self, consult):
        other = LineItem(id="LAB-1", unit_price_paise=1999, qty=3, discount_pct="12.5", tax_pct=18)
        assert calculate_totals([consult, other]) == calculate_totals([other, consult])

    def test_negative_base_charge_rejected(self):
        with pytest.raises(PricingValidationError, match="Base charge cannot be negative"):
            calculate_totals([], base_charge_paise=-1)


class TestLineItemValidation:
    """LineItem rejects malformed input."""

    def test_zero_qty_rejected(self):
        with pytest.raises(ValidationError):
            LineItem(id="X", unit_price_paise=100, qty=0)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            LineItem(id="X", unit_price_paise=-100)

    def test_discount_over_100_rejected(self):
        with pytest.raises(ValidationError):
            LineItem(id="X", unit_price_paise=100, discount_pct=120)


# =============================================================================
# GLOBAL DISCOUNT
# =============================================================================


class TestApplyGlobalDiscount:
    """Tests for apply_global_discount()."""

    def test_corrected_formula_keeps_tax(self, consult_totals):
        totals = apply_global_discount(consult_totals, 200)
        assert totals.subtotal_paise == 900
        assert totals.discount_total_paise == 300
        assert totals.tax_total_paise == 45
        assert totals.net_payable_paise == 745

    def test_legacy_formula(self, consult_totals):
        """Line discounts subtracted a second time and tax dropped."""
        totals = apply_global_discount(consult_totals, 200, GlobalDiscountMode.LEGACY)
        assert totals.discount_total_paise == 300
        assert totals.net_payable_paise == 600

    def test_legacy_formula_never_negative(self, consult_totals):
        totals = apply_global_discount(consult_totals, 900, GlobalDiscountMode.LEGACY)
        assert totals.net_payable_paise == 0

    def test_clamped_to_subtotal(self, consult_totals):
        totals = apply_global_discount(consult_totals, 5000)
        assert totals.discount_total_paise == 100 + 900
        assert totals.net_payable_paise == 45

    @pytest.mark.parametrize("requested", [0, 1, 899, 900, 901, 10**12])
    def test_effective_discount_never_exceeds_subtotal(self, consult_totals, requested):
        totals = apply_global_discount(consult_totals, requested)
        effective = totals.discount_total_paise - consult_totals.discount_total_paise
        assert effective <= consult_totals.subtotal_paise
        assert totals.net_payable_paise >= 0

    def test_zero_discount_is_identity(self, consult_totals):
        assert apply_global_discount(consult_totals, 0) == consult_totals

    def test_negative_discount_rejected(self, consult_totals):
        with pytest.raises(PricingValidationError, match="cannot be negative"):
            apply_global_discount(consult_totals, -10)

    def test_mode_accepts_string(self, consult_totals):
        totals = apply_global_discount(consult_totals, 200, "legacy")
        assert totals.net_payable_paise == 600


class TestResolveGlobalDiscount:
    """Tests for resolve_global_discount()."""

    def test_flat(self, consult_totals):
        discount = GlobalDiscount(kind=DiscountKind.FLAT, value=250)
        assert resolve_global_discount(consult_totals, discount) == 250

    def test_percent_of_subtotal(self, consult_totals):
        discount = GlobalDiscount(kind=DiscountKind.PERCENT, value=10)
        assert resolve_global_discount(consult_totals, discount) == 90

    def test_percent_rounds_half_up(self):
        totals = Totals(subtotal_paise=5, net_payable_paise=5)
        discount = GlobalDiscount(kind=DiscountKind.PERCENT, value=10)
        assert resolve_global_discount(totals, discount) == 1  # 0.5

    def test_percent_over_100_rejected(self, consult_totals):
        discount = GlobalDiscount(kind=DiscountKind.PERCENT, value=150)
        with pytest.raises(PricingValidationError, match="between 0 and 100"):
            resolve_global_discount(consult_totals, discount)

    def test_negative_value_rejected_by_model(self):
        with pytest.raises(ValidationError):
            GlobalDiscount(kind=DiscountKind.FLAT, value=-1)


# =============================================================================
# CART
# =============================================================================


class TestCart:
    """Tests for the Cart collection."""

    def test_add_keeps_insertion_order(self, consult):
        cart = Cart()
        cart.add(LineItem(id="B", unit_price_paise=100))
        cart.add(consult)
        cart.add(LineItem(id="A", unit_price_paise=100))

        assert [i.id for i in cart.items] == ["B", "SVC-1", "A"]

    def test_add_same_id_increases_qty(self, consult):
        cart = Cart()
        cart.add(consult)
        line = cart.add(LineItem(id="SVC-1", unit_price_paise=500))

        assert len(cart) == 1
        assert line.qty == 3

    def test_add_copies_the_item(self, consult):
        cart = Cart()
        cart.add(consult)
        cart.update_qty("SVC-1", 5)
        assert consult.qty == 2

    def test_totals_match_calculate_totals(self, consult):
        cart = Cart()
        cart.add(consult)
        assert cart.totals() == calculate_totals([consult])

    def test_totals_recomputed_after_edit(self, consult):
        cart = Cart()
        cart.add(consult)
        cart.update_qty("SVC-1", 4)
        cart.update_discount("SVC-1", 0)

        totals = cart.totals()
        assert totals.subtotal_paise == 2000
        assert totals.discount_total_paise == 0
        assert totals.tax_total_paise == 100

    def test_update_qty_below_one_rejected(self, consult):
        cart = Cart()
        cart.add(consult)
        with pytest.raises(PricingValidationError, match="at least 1"):
            cart.update_qty("SVC-1", 0)
        assert cart.items[0].qty == 2

    def test_update_discount_out_of_range_rejected(self, consult):
        cart = Cart()
        cart.add(consult)
        with pytest.raises(PricingValidationError):
            cart.update_discount("SVC-1", 101)
        assert cart.items[0].discount_pct == Decimal(10)

    def test_unknown_line_raises(self):
        cart = Cart()
        with pytest.raises(LineItemNotFoundError, match="not found"):
            cart.update_qty("missing", 2)
        with pytest.raises(LineItemNotFoundError):
            cart.remove("missing")

    def test_remove(self, consult):
        cart = Cart()
        cart.add(consult)
        removed = cart.remove("SVC-1")
        assert removed.id == "SVC-1"
        assert len(cart) == 0
        assert cart.totals() == Totals()

    def test_base_charge(self, consult):
        cart = Cart(base_charge_paise=1000)
        cart.add(consult)
        assert cart.totals().subtotal_paise == 1900

    def test_global_discount_applied(self, consult):
        cart = Cart()
        cart.add(consult)
        cart.set_global_discount(GlobalDiscount(kind=DiscountKind.FLAT, value=200))

        assert cart.base_totals().net_payable_paise == 945
        assert cart.totals().net_payable_paise == 745

    def test_legacy_mode_cart(self, consult):
        cart = Cart(mode=GlobalDiscountMode.LEGACY)
        cart.add(consult)
        cart.set_global_discount(GlobalDiscount(kind=DiscountKind.FLAT, value=200))
        assert cart.totals().net_payable_paise == 600

    def test_clear_removes_lines_and_discount(self, consult):
        cart = Cart(base_charge_paise=500)
        cart.add(consult)
        cart.set_global_discount(GlobalDiscount(kind=DiscountKind.PERCENT, value=5))
        cart.clear()

        assert len(cart) == 0
        assert cart.global_discount is None
        assert cart.totals().net_payable_paise == 500

    def test_negative_base_charge_rejected(self):
        with pytest.raises(PricingValidationError):
            Cart(base_charge_paise=-100)
