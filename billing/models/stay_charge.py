"""Bed stay charge models.

A stay charge settles the time a patient spent in a bed they are leaving.
It is created when a bed transfer happens and billed later, exactly once.
Amounts are in paise; timestamps are UTC.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from billing.models.cart import LineItem
from billing.money import Money, Percent
from utils.timezone import to_utc


class StayChargeStatus(str, Enum):
    """Stay charge lifecycle status. PENDING -> BILLED, never back."""

    PENDING = "pending"
    BILLED = "billed"


class BedRef(BaseModel):
    """Location and daily tariff of a bed."""

    model_config = {"frozen": True}

    bed_id: str = Field(..., min_length=1)
    bed_name: str = Field(..., min_length=1, max_length=100)
    room_name: str | None = Field(None, max_length=100)
    unit_name: str | None = Field(None, max_length=100)
    tariff_paise: Money


class StayProration(BaseModel):
    """Days stayed and amount owed for one occupancy."""

    model_config = {"frozen": True}

    days_stayed: int = Field(..., ge=1)
    total_amount_paise: int = Field(..., ge=0)


class TransferCreate(BaseModel):
    """Data describing a bed transfer that needs its origin stay billed."""

    patient_id: str = Field(..., min_length=1, max_length=64)
    from_bed: BedRef
    to_bed: BedRef
    admission_at: datetime
    transfer_at: datetime | None = None  # Defaults to now
    transfer_id: str | None = Field(None, max_length=64)
    tax_pct: Percent | None = None  # Defaults to policy stay tax

    @field_validator("admission_at", "transfer_at")
    @classmethod
    def require_aware(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        return to_utc(value)


class StayCharge(BaseModel):
    """Full stay charge record as stored. Immutable; billing produces a copy."""

    model_config = {"frozen": True, "from_attributes": True}

    id: UUID
    patient_id: str
    from_bed: BedRef
    to_bed: BedRef
    admission_at: datetime
    transfer_at: datetime
    days_stayed: int = Field(..., ge=1)
    from_tariff_paise: int = Field(..., ge=0)
    total_amount_paise: int = Field(..., ge=0)
    tax_pct: Decimal
    status: StayChargeStatus = StayChargeStatus.PENDING
    bill_number: str | None = None
    transfer_id: str | None = None
    created_at: datetime
    billed_at: datetime | None = None

    @property
    def is_billed(self) -> bool:
        """Whether the charge has been billed."""
        return self.status == StayChargeStatus.BILLED

    def to_line_item(self) -> LineItem:
        """Cart line for this charge: one unit priced at the whole stay."""
        return LineItem(
            id=str(self.id),
            code=f"BED-{self.from_bed.bed_name}",
            name=f"Bed Charges - {self.from_bed.bed_name} ({self.days_stayed} days)",
            unit_price_paise=self.total_amount_paise,
            qty=1,
            tax_pct=self.tax_pct,
        )
