"""
FastAPI application factory.

The calculation core takes no configuration. The app only decides where stay
charges live: PostgreSQL when BILLING_DATABASE_URL is set (read from the
environment or a .env file), otherwise an in-memory store.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI

from api.billing import create_billing_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from billing.config import BillingPolicy, DEFAULT_POLICY
from billing.event_bus import EventBus
from billing.services.stay_charge_service import StayChargeService
from billing.stores import StayChargeStore, InMemoryStayChargeStore, PostgresStayChargeStore

logger = logging.getLogger(__name__)


def build_store(database_url: str | None = None) -> StayChargeStore:
    """PostgreSQL store for a database URL, in-memory store without one."""
    if database_url is None:
        load_dotenv()
        database_url = os.getenv("BILLING_DATABASE_URL")

    if not database_url:
        logger.info("BILLING_DATABASE_URL not set, using in-memory stay charge store")
        return InMemoryStayChargeStore()

    from clients.postgres_client import PostgresClient

    store = PostgresStayChargeStore(PostgresClient(database_url))
    store.create_schema()
    return store


def create_app(
    store: StayChargeStore | None = None,
    policy: BillingPolicy = DEFAULT_POLICY,
    event_bus: EventBus | None = None,
) -> FastAPI:
    """Build the billing API with middleware, error handlers and routes."""
    services = {
        "stay_charge": StayChargeService(
            store if store is not None else build_store(),
            event_bus=event_bus,
            policy=policy,
        ),
    }

    app = FastAPI(title="Hospital Billing Engine")
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(create_billing_router(services, policy), prefix="/api")
    app.state.services = services

    return app
