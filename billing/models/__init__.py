"""Billing domain models."""

from billing.models.pricing import PriceSpec, PriceResult, PriceTier
from billing.models.cart import (
    LineItem, Totals, GlobalDiscount, DiscountKind, GlobalDiscountMode,
)
from billing.models.stay_charge import (
    StayCharge, StayChargeStatus, StayProration, BedRef, TransferCreate,
)
from billing.models.identifier import Identifier, IdPrefix

__all__ = [
    # Pricing
    "PriceSpec", "PriceResult", "PriceTier",
    # Cart
    "LineItem", "Totals", "GlobalDiscount", "DiscountKind", "GlobalDiscountMode",
    # Stay charge
    "StayCharge", "StayChargeStatus", "StayProration", "BedRef", "TransferCreate",
    # Identifier
    "Identifier", "IdPrefix",
]
