"""API test fixtures - TestClient over the billing app with an in-memory store."""

import pytest
from starlette.testclient import TestClient

from api.app import create_app


@pytest.fixture
def app(store, event_bus):
    """Billing app wired to the shared in-memory store and event bus."""
    return create_app(store=store, event_bus=event_bus)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def transfer_body():
    """Transfer out of WA-102-1 after four and a half days, as JSON."""
    return {
        "patient_id": "MRN0105000",
        "from_bed": {
            "bed_id": "bed-wa-3",
            "bed_name": "WA-102-1",
            "room_name": "Room 102",
            "unit_name": "Ward A",
            "tariff_paise": 3500,
        },
        "to_bed": {
            "bed_id": "bed-wa-1",
            "bed_name": "WA-101-1",
            "tariff_paise": 3000,
        },
        "admission_at": "2025-12-18T10:00:00Z",
        "transfer_at": "2025-12-22T14:30:00Z",
        "transfer_id": "TR-001",
    }
