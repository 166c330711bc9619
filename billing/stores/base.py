"""Storage interface for stay charges."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from billing.models import StayCharge


class StayChargeStore(Protocol):
    """
    Narrow persistence interface for stay charges.

    Implementations must make mark_billed() atomic per record: two concurrent
    calls for the same pending charge produce exactly one transition.
    """

    def insert_pending(self, charge: StayCharge) -> StayCharge:
        """Store a new charge. The charge must be PENDING."""
        ...

    def get(self, charge_id: UUID) -> StayCharge | None:
        """Charge by ID, or None."""
        ...

    def list_pending_for_patient(self, patient_id: str) -> list[StayCharge]:
        """Pending charges for a patient, oldest first."""
        ...

    def mark_billed(
        self, charge_id: UUID, bill_number: str, billed_at: datetime
    ) -> tuple[StayCharge, bool] | None:
        """
        Transition a charge to BILLED.

        Returns:
            (charge, transitioned) where transitioned is False if the charge
            was already billed and is returned unchanged. None if missing.
        """
        ...
