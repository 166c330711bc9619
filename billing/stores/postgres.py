"""
PostgreSQL stay charge store.

Billing is a conditional UPDATE (status = 'pending'), so concurrent callers
cannot both transition the same charge.
"""

from datetime import datetime
from uuid import UUID

from psycopg2.extras import Json

from billing.models import StayCharge, StayChargeStatus
from clients.postgres_client import PostgresClient

SCHEMA = """
CREATE TABLE IF NOT EXISTS stay_charges (
    id UUID PRIMARY KEY,
    patient_id TEXT NOT NULL,
    from_bed JSONB NOT NULL,
    to_bed JSONB NOT NULL,
    admission_at TIMESTAMPTZ NOT NULL,
    transfer_at TIMESTAMPTZ NOT NULL,
    days_stayed INTEGER NOT NULL CHECK (days_stayed >= 1),
    from_tariff_paise BIGINT NOT NULL CHECK (from_tariff_paise >= 0),
    total_amount_paise BIGINT NOT NULL CHECK (total_amount_paise >= 0),
    tax_pct NUMERIC(5, 2) NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending' CHECK (status IN ('pending', 'billed')),
    bill_number TEXT,
    transfer_id TEXT,
    created_at TIMESTAMPTZ NOT NULL,
    billed_at TIMESTAMPTZ
);
CREATE INDEX IF NOT EXISTS stay_charges_patient_pending
    ON stay_charges (patient_id, created_at) WHERE status = 'pending';
"""


class PostgresStayChargeStore:
    """StayChargeStore backed by the stay_charges table."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def create_schema(self) -> None:
        """Create the stay_charges table if it does not exist."""
        self.postgres.execute(SCHEMA)

    def insert_pending(self, charge: StayCharge) -> StayCharge:
        if charge.status != StayChargeStatus.PENDING:
            raise ValueError(f"Stay charge {charge.id} is not pending")

        row = self.postgres.execute_returning(
            """
            INSERT INTO stay_charges (
                id, patient_id, from_bed, to_bed,
                admission_at, transfer_at, days_stayed,
                from_tariff_paise, total_amount_paise, tax_pct,
                status, transfer_id, created_at
            ) VALUES (
                %s, %s, %s, %s,
                %s, %s, %s,
                %s, %s, %s,
                %s, %s, %s
            )
            RETURNING *
            """,
            (
                charge.id, charge.patient_id,
                Json(charge.from_bed.model_dump(mode="json")),
                Json(charge.to_bed.model_dump(mode="json")),
                charge.admission_at, charge.transfer_at, charge.days_stayed,
                charge.from_tariff_paise, charge.total_amount_paise, charge.tax_pct,
                charge.status.value, charge.transfer_id, charge.created_at,
            )
        )[0]

        return StayCharge.model_validate(row)

    def get(self, charge_id: UUID) -> StayCharge | None:
        row = self.postgres.execute_single(
            "SELECT * FROM stay_charges WHERE id = %s",
            (charge_id,)
        )
        if row is None:
            return None
        return StayCharge.model_validate(row)

    def list_pending_for_patient(self, patient_id: str) -> list[StayCharge]:
        rows = self.postgres.execute(
            """
            SELECT * FROM stay_charges
            WHERE patient_id = %s AND status = 'pending'
            ORDER BY created_at ASC
            """,
            (patient_id,)
        )
        return [StayCharge.model_validate(row) for row in rows]

    def mark_billed(
        self, charge_id: UUID, bill_number: str, billed_at: datetime
    ) -> tuple[StayCharge, bool] | None:
        rows = self.postgres.execute_returning(
            """
            UPDATE stay_charges
            SET status = 'billed', bill_number = %s, billed_at = %s
            WHERE id = %s AND status = 'pending'
            RETURNING *
            """,
            (bill_number, billed_at, charge_id)
        )
        if rows:
            return StayCharge.model_validate(rows[0]), True

        # Nothing pending: either already billed or missing
        current = self.get(charge_id)
        if current is None:
            return None
        return current, False
