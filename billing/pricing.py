"""
Single-item price derivation for the pricing catalog.

Net price follows a fixed cascade: markup on the base price, discount on the
marked-up price, tax on what remains. Every stage is rounded half-up to whole
paise as soon as it is computed, so the net price is an exact sum of the
amounts shown in the breakdown.
"""

from decimal import Decimal
from enum import Enum

from billing.config import BillingPolicy, DEFAULT_POLICY
from billing.exceptions import PricingValidationError
from billing.models import PriceSpec, PriceResult, PriceTier
from billing.money import (
    ZERO, HUNDRED,
    to_decimal, round_half_up, percent_of,
    format_rupees, format_pct,
)


class PriceChangeOperation(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class PriceChangeUnit(str, Enum):
    AMOUNT = "amount"    # Paise
    PERCENT = "percent"  # Percentage of current price


def validate_price_input(
    base_price_paise: int | None = None,
    markup_pct: int | float | str | Decimal | None = None,
    discount_pct: int | float | str | Decimal | None = None,
    tax_pct: int | float | str | Decimal | None = None,
) -> list[str]:
    """
    Check price inputs without computing anything.

    Only supplied fields are checked, so partially filled forms can be
    validated as they are edited.

    Returns:
        List of error messages. Empty if everything supplied is valid.
    """
    errors: list[str] = []

    if base_price_paise is not None and base_price_paise < 0:
        errors.append("Base price cannot be negative")

    for label, pct in (("Markup", markup_pct), ("Discount", discount_pct), ("Tax", tax_pct)):
        if pct is not None and not ZERO <= to_decimal(pct) <= HUNDRED:
            errors.append(f"{label} percentage must be between 0 and 100")

    return errors


def calculate_net_price(spec: PriceSpec) -> PriceResult:
    """
    Derive net price from base price, markup, discount and tax.

    Cascade:
        markup   = round(base * markup% / 100)
        discount = round((base + markup) * discount% / 100)
        subtotal = base + markup - discount
        tax      = round(subtotal * tax% / 100)
        net      = subtotal + tax

    Args:
        spec: Base price in paise and percentage modifiers

    Returns:
        PriceResult with every stage and a display breakdown

    Raises:
        PricingValidationError: If base price is negative or any percentage
            is outside [0, 100]. No partial result is produced.
    """
    errors = validate_price_input(
        spec.base_price_paise, spec.markup_pct, spec.discount_pct, spec.tax_pct
    )
    if errors:
        raise PricingValidationError(errors)

    base = spec.base_price_paise
    markup = round_half_up(percent_of(base, spec.markup_pct))
    after_markup = base + markup

    discount = round_half_up(percent_of(after_markup, spec.discount_pct))
    subtotal = after_markup - discount

    tax = round_half_up(percent_of(subtotal, spec.tax_pct))
    net = subtotal + tax

    breakdown = [f"Base Price: {format_rupees(base)}"]
    if spec.markup_pct > 0:
        breakdown.append(f"+ Markup ({format_pct(spec.markup_pct)}%): {format_rupees(markup)}")
    if spec.discount_pct > 0:
        breakdown.append(f"- Discount ({format_pct(spec.discount_pct)}%): {format_rupees(discount)}")
    breakdown.append(f"= Subtotal: {format_rupees(subtotal)}")
    if spec.tax_pct > 0:
        breakdown.append(f"+ Tax ({format_pct(spec.tax_pct)}%): {format_rupees(tax)}")
    breakdown.append(f"= Net Price: {format_rupees(net)}")

    return PriceResult(
        base_price_paise=base,
        markup_amount_paise=markup,
        discount_amount_paise=discount,
        subtotal_paise=subtotal,
        tax_amount_paise=tax,
        net_price_paise=net,
        breakdown=breakdown,
    )


def suggest_tiers(net_price_paise: int, policy: BillingPolicy = DEFAULT_POLICY) -> PriceTier:
    """
    Suggest per-payer prices from a net price.

    Cash pays the net price; insurance and corporate get the policy
    multipliers (92% and 96% by default), rounded half-up.

    Raises:
        PricingValidationError: If net price is negative
    """
    if net_price_paise < 0:
        raise PricingValidationError("Net price cannot be negative")

    net = Decimal(net_price_paise)
    return PriceTier(
        cash_paise=net_price_paise,
        insurance_paise=round_half_up(net * policy.insurance_multiplier),
        corporate_paise=round_half_up(net * policy.corporate_multiplier),
    )


def apply_bulk_price_change(
    current_price_paise: int,
    operation: PriceChangeOperation | str,
    value: int | float | str | Decimal,
    unit: PriceChangeUnit | str,
) -> int:
    """
    Raise or lower a price by a fixed amount or a percentage.

    Args:
        current_price_paise: Price being adjusted
        operation: increase or decrease
        value: Paise for AMOUNT, percentage for PERCENT
        unit: How value is interpreted

    Returns:
        New price in paise

    Raises:
        PricingValidationError: If inputs are negative or the result would
            drop below zero
    """
    operation = PriceChangeOperation(operation)
    unit = PriceChangeUnit(unit)

    errors = []
    if current_price_paise < 0:
        errors.append("Current price cannot be negative")
    if to_decimal(value) < 0:
        errors.append("Change value cannot be negative")
    if errors:
        raise PricingValidationError(errors)

    if unit == PriceChangeUnit.AMOUNT:
        change = round_half_up(to_decimal(value))
    else:
        change = round_half_up(percent_of(current_price_paise, value))

    if operation == PriceChangeOperation.INCREASE:
        return current_price_paise + change

    new_price = current_price_paise - change
    if new_price < 0:
        raise PricingValidationError(
            f"Decrease of {change} paise exceeds current price {current_price_paise}"
        )
    return new_price
