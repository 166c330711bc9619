"""
Cart aggregation and global discount.

Totals are always recomputed from the full line sequence, never patched
incrementally. Line amounts are summed exactly as Decimals and each total is
rounded half-up to whole paise once, at the end, so rounding error does not
accumulate across many lines.

A global discount is a second pass over the aggregated totals. It is clamped
to the subtotal; the clamp is a business rule and is not reported as an error.
"""

import logging
from decimal import Decimal
from typing import Iterable

from billing.exceptions import PricingValidationError, LineItemNotFoundError
from billing.models import (
    LineItem, Totals, GlobalDiscount, DiscountKind, GlobalDiscountMode,
)
from billing.money import (
    to_decimal, round_half_up, percent_of, require_money, require_percent,
)

logger = logging.getLogger(__name__)


def line_gross(item: LineItem) -> Decimal:
    """Unit price times quantity."""
    return Decimal(item.unit_price_paise * item.qty)


def line_discount(item: LineItem) -> Decimal:
    """Line discount on the gross amount, unrounded."""
    return percent_of(line_gross(item), item.discount_pct)


def line_net(item: LineItem) -> Decimal:
    """Line amount after its discount, before tax, unrounded."""
    return line_gross(item) - line_discount(item)


def line_tax(item: LineItem) -> Decimal:
    """Tax on the discounted line amount, unrounded."""
    return percent_of(line_net(item), item.tax_pct)


def line_total(item: LineItem) -> Decimal:
    """Discounted line amount plus tax, unrounded."""
    return line_net(item) + line_tax(item)


def calculate_totals(items: Iterable[LineItem], base_charge_paise: int = 0) -> Totals:
    """
    Aggregate line items and an optional flat base charge.

    subtotal   = sum(gross) + base_charge - sum(line discount)
    discount   = sum(line discount)
    tax        = sum(line tax)
    net        = subtotal + tax

    Args:
        items: Cart lines in display order (order does not affect totals)
        base_charge_paise: Flat charge with no discount or tax, e.g. a room
            charge on admission

    Returns:
        Totals rounded to whole paise

    Raises:
        PricingValidationError: If base charge is negative
    """
    require_money(base_charge_paise, "Base charge")

    gross = Decimal(0)
    discount = Decimal(0)
    tax = Decimal(0)
    for item in items:
        gross += line_gross(item)
        discount += line_discount(item)
        tax += line_tax(item)

    subtotal = gross + base_charge_paise - discount

    return Totals(
        subtotal_paise=round_half_up(subtotal),
        discount_total_paise=round_half_up(discount),
        tax_total_paise=round_half_up(tax),
        net_payable_paise=round_half_up(subtotal + tax),
    )


def resolve_global_discount(totals: Totals, discount: GlobalDiscount) -> int:
    """
    Convert a flat or percentage global discount into paise.

    Percentages are taken of the subtotal and rounded half-up. The result is
    the requested amount; clamping happens in apply_global_discount().

    Raises:
        PricingValidationError: If a percentage discount exceeds 100
    """
    if discount.kind == DiscountKind.PERCENT:
        require_percent(discount.value, "Discount")
        return round_half_up(percent_of(totals.subtotal_paise, discount.value))
    return round_half_up(to_decimal(discount.value))


def apply_global_discount(
    totals: Totals,
    discount_amount_paise: int,
    mode: GlobalDiscountMode = GlobalDiscountMode.CORRECTED,
) -> Totals:
    """
    Apply one discount across aggregated totals.

    The discount is clamped to the subtotal. discount_total grows by the
    clamped amount. The payable amount depends on mode:

    - CORRECTED: net_payable - clamped. The discount comes off the
      tax-inclusive payable amount.
    - LEGACY: subtotal - discount_total - clamped, floored at zero. Matches
      the older cart screen, which subtracts line discounts a second time and
      leaves tax out. Kept only for reproducing historical bills.

    Args:
        totals: Output of calculate_totals()
        discount_amount_paise: Requested discount
        mode: Payable formula

    Returns:
        Adjusted Totals; subtotal and tax_total are unchanged

    Raises:
        PricingValidationError: If the requested discount is negative
    """
    require_money(discount_amount_paise, "Global discount")

    clamped = min(discount_amount_paise, totals.subtotal_paise)
    if clamped < discount_amount_paise:
        logger.debug(
            "Global discount %s clamped to subtotal %s",
            discount_amount_paise,
            totals.subtotal_paise,
        )

    if GlobalDiscountMode(mode) == GlobalDiscountMode.LEGACY:
        net_payable = max(
            0, totals.subtotal_paise - totals.discount_total_paise - clamped
        )
    else:
        net_payable = totals.net_payable_paise - clamped

    return Totals(
        subtotal_paise=totals.subtotal_paise,
        discount_total_paise=totals.discount_total_paise + clamped,
        tax_total_paise=totals.tax_total_paise,
        net_payable_paise=net_payable,
    )


class Cart:
    """
    Ordered collection of line items with an optional base charge and
    global discount.

    Lines keep insertion order for display. Every totals() call recomputes
    from all lines.

    Usage:
        cart = Cart(base_charge_paise=350000)
        cart.add(LineItem(id="CBC", unit_price_paise=45000, tax_pct=5))
        cart.update_qty("CBC", 2)
        cart.set_global_discount(GlobalDiscount(kind="flat", value=10000))
        totals = cart.totals()
    """

    def __init__(
        self,
        base_charge_paise: int = 0,
        mode: GlobalDiscountMode = GlobalDiscountMode.CORRECTED,
    ):
        require_money(base_charge_paise, "Base charge")
        self.base_charge_paise = base_charge_paise
        self.mode = GlobalDiscountMode(mode)
        self.global_discount: GlobalDiscount | None = None
        self._items: list[LineItem] = []

    @property
    def items(self) -> list[LineItem]:
        """Lines in insertion order (a copy of the list)."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def _find(self, item_id: str) -> LineItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise LineItemNotFoundError(item_id)

    def add(self, item: LineItem) -> LineItem:
        """
        Add a line. Adding an id already in the cart increases its quantity.

        Returns:
            The line as held by the cart
        """
        for existing in self._items:
            if existing.id == item.id:
                existing.qty = existing.qty + item.qty
                return existing

        line = item.model_copy()
        self._items.append(line)
        return line

    def update_qty(self, item_id: str, qty: int) -> LineItem:
        """
        Set a line's quantity.

        Raises:
            PricingValidationError: If qty is less than 1
            LineItemNotFoundError: If the line is not in the cart
        """
        if qty < 1:
            raise PricingValidationError("Quantity must be at least 1")
        item = self._find(item_id)
        item.qty = qty
        return item

    def update_discount(self, item_id: str, discount_pct: int | float | str | Decimal) -> LineItem:
        """
        Set a line's discount percentage.

        Raises:
            PricingValidationError: If discount is outside [0, 100]
            LineItemNotFoundError: If the line is not in the cart
        """
        require_percent(discount_pct, "Discount")
        item = self._find(item_id)
        item.discount_pct = to_decimal(discount_pct)
        return item

    def remove(self, item_id: str) -> LineItem:
        """Remove a line and return it."""
        item = self._find(item_id)
        self._items.remove(item)
        return item

    def clear(self) -> None:
        """Remove all lines and the global discount."""
        self._items.clear()
        self.global_discount = None

    def set_global_discount(self, discount: GlobalDiscount | None) -> None:
        """Set or clear the global discount."""
        self.global_discount = discount

    def base_totals(self) -> Totals:
        """Totals before the global discount."""
        return calculate_totals(self._items, self.base_charge_paise)

    def totals(self) -> Totals:
        """Totals after the global discount, if one is set."""
        totals = self.base_totals()
        if self.global_discount is None:
            return totals

        amount = resolve_global_discount(totals, self.global_discount)
        return apply_global_discount(totals, amount, self.mode)
