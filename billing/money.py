"""Money and percentage primitives.

All money is an integer count of paise (1 rupee = 100 paise) to avoid
floating point issues. Percentages are Decimals in [0, 100].
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated

from pydantic import Field

from billing.exceptions import PricingValidationError

Money = Annotated[int, Field(ge=0)]
Percent = Annotated[Decimal, Field(ge=0, le=100)]

ZERO = Decimal(0)
HUNDRED = Decimal(100)


def to_decimal(value: int | float | str | Decimal) -> Decimal:
    """Convert to Decimal without inheriting binary float error."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_half_up(value: Decimal | int) -> int:
    """Round to whole paise, halves away from zero."""
    return int(to_decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def percent_of(amount: int | Decimal, pct: int | float | str | Decimal) -> Decimal:
    """Exact `amount * pct / 100`. Callers decide when to round."""
    return to_decimal(amount) * to_decimal(pct) / HUNDRED


def require_money(value: int, label: str) -> None:
    """Raise if a money amount is negative."""
    if value < 0:
        raise PricingValidationError(f"{label} cannot be negative")


def require_percent(value: int | float | str | Decimal, label: str) -> None:
    """Raise if a percentage falls outside [0, 100]."""
    if not ZERO <= to_decimal(value) <= HUNDRED:
        raise PricingValidationError(f"{label} percentage must be between 0 and 100")


def format_rupees(paise: int) -> str:
    """Plain two-decimal rupee string for breakdown lines, e.g. ₹1100.00."""
    return f"₹{to_decimal(paise) / HUNDRED:.2f}"


def format_pct(pct: Decimal) -> str:
    """Render a percentage without trailing zeros (10, 12.5)."""
    return format(pct.normalize(), "f")
