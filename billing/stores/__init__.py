"""Stay charge storage."""

from billing.stores.base import StayChargeStore
from billing.stores.memory import InMemoryStayChargeStore
from billing.stores.postgres import PostgresStayChargeStore

__all__ = ["StayChargeStore", "InMemoryStayChargeStore", "PostgresStayChargeStore"]
