"""Cart line item and totals models.

All amounts are stored in paise (integer) to avoid floating point issues.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from billing.money import Money, Percent


class LineItem(BaseModel):
    """A priced service in a cart. Quantity and discount are editable."""

    model_config = {"validate_assignment": True}

    id: str = Field(..., min_length=1)
    unit_price_paise: Money
    qty: int = Field(1, ge=1)
    discount_pct: Percent = Decimal(0)
    tax_pct: Percent = Decimal(0)
    name: str | None = Field(None, max_length=255)
    code: str | None = Field(None, max_length=50)


class Totals(BaseModel):
    """Aggregated amounts for a cart."""

    model_config = {"frozen": True}

    subtotal_paise: int = 0
    discount_total_paise: int = 0
    tax_total_paise: int = 0
    net_payable_paise: int = 0


class DiscountKind(str, Enum):
    """How a global discount value is interpreted."""

    FLAT = "flat"        # Amount in paise
    PERCENT = "percent"  # Percentage of subtotal


class GlobalDiscount(BaseModel):
    """One discount applied across already aggregated totals."""

    model_config = {"frozen": True}

    kind: DiscountKind = DiscountKind.FLAT
    value: Decimal = Field(Decimal(0), ge=0)


class GlobalDiscountMode(str, Enum):
    """Formula used for the payable amount after a global discount."""

    CORRECTED = "corrected"  # net_payable - discount
    LEGACY = "legacy"        # subtotal - line discounts - discount, tax dropped
