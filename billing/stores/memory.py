"""
In-memory stay charge store.

Stand-in for a database in tests and single-process deployments. All reads
and writes go through one lock so a concurrent transfer and billing cannot
interleave a read-then-write status update.
"""

import threading
from datetime import datetime
from uuid import UUID

from billing.models import StayCharge, StayChargeStatus


class InMemoryStayChargeStore:
    """Thread-safe dict-backed StayChargeStore."""

    def __init__(self, charges: list[StayCharge] | None = None):
        self._charges: dict[UUID, StayCharge] = {}
        self._lock = threading.Lock()
        for charge in charges or []:
            self.insert_pending(charge)

    def insert_pending(self, charge: StayCharge) -> StayCharge:
        if charge.status != StayChargeStatus.PENDING:
            raise ValueError(f"Stay charge {charge.id} is not pending")

        with self._lock:
            if charge.id in self._charges:
                raise ValueError(f"Stay charge {charge.id} already exists")
            self._charges[charge.id] = charge
        return charge

    def get(self, charge_id: UUID) -> StayCharge | None:
        with self._lock:
            return self._charges.get(charge_id)

    def list_pending_for_patient(self, patient_id: str) -> list[StayCharge]:
        with self._lock:
            pending = [
                c for c in self._charges.values()
                if c.patient_id == patient_id and c.status == StayChargeStatus.PENDING
            ]
        return sorted(pending, key=lambda c: c.created_at)

    def mark_billed(
        self, charge_id: UUID, bill_number: str, billed_at: datetime
    ) -> tuple[StayCharge, bool] | None:
        with self._lock:
            current = self._charges.get(charge_id)
            if current is None:
                return None
            if current.status == StayChargeStatus.BILLED:
                return current, False

            updated = current.model_copy(update={
                "status": StayChargeStatus.BILLED,
                "bill_number": bill_number,
                "billed_at": billed_at,
            })
            self._charges[charge_id] = updated
            return updated, True
