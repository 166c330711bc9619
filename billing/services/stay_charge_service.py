"""
Stay charge service for bed transfers.

A transfer settles the stay in the bed being vacated: the charge is prorated
on the origin bed's tariff and recorded as PENDING. Billing moves it to
BILLED once; billing it again returns it unchanged.
"""

import logging
import random
from uuid import UUID, uuid4

from billing.config import BillingPolicy, DEFAULT_POLICY
from billing.event_bus import EventBus
from billing.events import StayChargeCreated, StayChargeBilled
from billing.exceptions import PricingValidationError, StayChargeNotFoundError
from billing.identifiers import generate_bill_id, parse_bill_id
from billing.models import StayCharge, StayChargeStatus, TransferCreate
from billing.stay import calculate_stay
from billing.stores import StayChargeStore
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class StayChargeService:
    """Service for stay charge operations."""

    def __init__(
        self,
        store: StayChargeStore,
        event_bus: EventBus | None = None,
        policy: BillingPolicy = DEFAULT_POLICY,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.event_bus = event_bus or EventBus()
        self.policy = policy
        self.rng = rng

    def record_transfer(self, data: TransferCreate) -> StayCharge:
        """
        Create a pending stay charge for a bed transfer.

        Args:
            data: Patient, origin and destination beds, admission time and
                optional transfer time (defaults to now)

        Returns:
            Created charge in PENDING status. A transfer stamped before
            admission is billed as one day.
        """
        now = now_utc()
        transfer_at = data.transfer_at or now
        proration = calculate_stay(data.from_bed.tariff_paise, data.admission_at, transfer_at)

        charge = StayCharge(
            id=uuid4(),
            patient_id=data.patient_id,
            from_bed=data.from_bed,
            to_bed=data.to_bed,
            admission_at=data.admission_at,
            transfer_at=transfer_at,
            days_stayed=proration.days_stayed,
            from_tariff_paise=data.from_bed.tariff_paise,
            total_amount_paise=proration.total_amount_paise,
            tax_pct=data.tax_pct if data.tax_pct is not None else self.policy.stay_tax_pct,
            status=StayChargeStatus.PENDING,
            transfer_id=data.transfer_id,
            created_at=now,
        )

        charge = self.store.insert_pending(charge)
        logger.info(
            "Stay charge %s created for patient %s: %s days at %s paise",
            charge.id,
            charge.patient_id,
            charge.days_stayed,
            charge.from_tariff_paise,
        )

        self.event_bus.publish(StayChargeCreated.create(charge=charge))
        return charge

    def get_by_id(self, charge_id: UUID) -> StayCharge | None:
        """Charge by ID, or None."""
        return self.store.get(charge_id)

    def list_pending_for_patient(self, patient_id: str) -> list[StayCharge]:
        """Pending charges for a patient, oldest first."""
        return self.store.list_pending_for_patient(patient_id)

    def mark_billed(self, charge_id: UUID, bill_number: str | None = None) -> StayCharge:
        """
        Mark a charge as billed.

        Args:
            charge_id: Stay charge UUID
            bill_number: Bill reference (e.g. "BIL042"); generated if omitted

        Returns:
            The billed charge. An already billed charge is returned unchanged.

        Raises:
            PricingValidationError: If bill_number is not a bill identifier
            StayChargeNotFoundError: If the charge does not exist
        """
        if bill_number is None:
            bill_number = generate_bill_id(self.rng)
        elif parse_bill_id(bill_number) is None:
            raise PricingValidationError(f"'{bill_number}' is not a bill number")

        result = self.store.mark_billed(charge_id, bill_number, now_utc())
        if result is None:
            raise StayChargeNotFoundError(charge_id)

        charge, transitioned = result
        if not transitioned:
            logger.debug("Stay charge %s already billed as %s", charge_id, charge.bill_number)
            return charge

        logger.info("Stay charge %s billed as %s", charge.id, charge.bill_number)
        self.event_bus.publish(StayChargeBilled.create(charge=charge))
        return charge
