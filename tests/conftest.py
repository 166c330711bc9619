"""Shared test fixtures for the billing test suite."""

import random
from datetime import datetime, timezone

import pytest

from billing.event_bus import EventBus
from billing.models import BedRef, TransferCreate
from billing.services.stay_charge_service import StayChargeService
from billing.stores import InMemoryStayChargeStore


# =============================================================================
# TEST CONSTANTS
# =============================================================================

TEST_PATIENT_ID = "MRN0105000"
OTHER_PATIENT_ID = "MRN0105001"

ADMISSION_AT = datetime(2025, 12, 18, 10, 0, tzinfo=timezone.utc)
TRANSFER_AT = datetime(2025, 12, 22, 14, 30, tzinfo=timezone.utc)


# =============================================================================
# BED FIXTURES
# =============================================================================


@pytest.fixture
def ward_bed() -> BedRef:
    """Origin bed: Ward A, Room 102 at 3500 per day."""
    return BedRef(
        bed_id="bed-wa-3",
        bed_name="WA-102-1",
        room_name="Room 102",
        unit_name="Ward A",
        tariff_paise=3500,
    )


@pytest.fixture
def other_bed() -> BedRef:
    """Destination bed: Ward A, Room 101 at 3000 per day."""
    return BedRef(
        bed_id="bed-wa-1",
        bed_name="WA-101-1",
        room_name="Room 101",
        unit_name="Ward A",
        tariff_paise=3000,
    )


@pytest.fixture
def transfer(ward_bed, other_bed) -> TransferCreate:
    """Transfer out of ward_bed after four and a half days."""
    return TransferCreate(
        patient_id=TEST_PATIENT_ID,
        from_bed=ward_bed,
        to_bed=other_bed,
        admission_at=ADMISSION_AT,
        transfer_at=TRANSFER_AT,
        transfer_id="TR-001",
    )


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def store():
    return InMemoryStayChargeStore()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def rng():
    """Seeded random source for reproducible identifiers."""
    return random.Random(42)


@pytest.fixture
def stay_charge_service(store, event_bus, rng):
    return StayChargeService(store, event_bus=event_bus, rng=rng)
