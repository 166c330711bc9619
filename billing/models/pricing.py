"""Catalog pricing models.

All amounts are stored in paise (integer) to avoid floating point issues.
₹10.00 = 1000 paise. Percentages are Decimals in [0, 100].
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from billing.money import Money, Percent


class PriceSpec(BaseModel):
    """Base price and modifiers for a single catalog item."""

    model_config = {"frozen": True}

    base_price_paise: Money
    markup_pct: Percent = Decimal(0)
    discount_pct: Percent = Decimal(0)
    tax_pct: Percent = Decimal(0)


class PriceResult(BaseModel):
    """Every stage of the markup, discount and tax cascade."""

    model_config = {"frozen": True}

    base_price_paise: int
    markup_amount_paise: int
    discount_amount_paise: int
    subtotal_paise: int
    tax_amount_paise: int
    net_price_paise: int
    breakdown: list[str] = Field(default_factory=list)


class PriceTier(BaseModel):
    """Net price per payer class."""

    model_config = {"frozen": True}

    cash_paise: int
    insurance_paise: int
    corporate_paise: int
