"""
Domain events for billing.

Immutable event objects describing stay charge lifecycle changes. The
service publishes what happened; collaborators (a billing screen, a ledger
export) react without the service knowing who is listening.

Events carry the full StayCharge so handlers don't need to re-read the store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class BillingEvent:
    """Base class for all billing domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


@dataclass(frozen=True)
class StayChargeEvent(BillingEvent):
    """Events related to stay charge lifecycle."""
    charge: Any = None  # StayCharge


@dataclass(frozen=True)
class StayChargeCreated(StayChargeEvent):
    """A bed transfer produced a pending stay charge."""

    @classmethod
    def create(cls, charge: Any) -> "StayChargeCreated":
        return cls(charge=charge)


@dataclass(frozen=True)
class StayChargeBilled(StayChargeEvent):
    """A pending stay charge was billed."""

    @classmethod
    def create(cls, charge: Any) -> "StayChargeBilled":
        return cls(charge=charge)
