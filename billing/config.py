"""Billing policy constants.

Passed explicitly to the functions that need them. Nothing here is read from
the environment; the calculation core has no hidden configuration.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class BillingPolicy(BaseModel):
    """
    Policy constants for tier suggestion and stay charges.

    Multipliers are fractions of the cash (net) price.
    """

    model_config = {"frozen": True}

    insurance_multiplier: Decimal = Field(
        default=Decimal("0.92"),
        description="Insurance tier as a fraction of net price",
        ge=0,
        le=1,
    )
    corporate_multiplier: Decimal = Field(
        default=Decimal("0.96"),
        description="Corporate tier as a fraction of net price",
        ge=0,
        le=1,
    )
    stay_tax_pct: Decimal = Field(
        default=Decimal("12"),
        description="Tax percentage applied to bed stay charges",
        ge=0,
        le=100,
    )


DEFAULT_POLICY = BillingPolicy()
