"""
Event bus for billing domain events.

Synchronous in-process pub/sub. Handlers run in the publisher's thread.
Handler errors are logged and never propagate: the store write has already
happened.
"""

import logging
from typing import Callable, Dict, List

from billing.events import BillingEvent

logger = logging.getLogger(__name__)


class EventBus:
    """
    In-process event bus.

    Subscribe by event class name, publish by event instance. Handlers are
    called in subscription order.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable):
        """
        Subscribe to events of one type.

        Args:
            event_type: Event class name (e.g. 'StayChargeBilled')
            callback: Called with the event instance
        """
        self._subscribers.setdefault(event_type, []).append(callback)

    def publish(self, event: BillingEvent):
        """Deliver an event to every subscriber of its type."""
        event_type = event.__class__.__name__

        for callback in self._subscribers.get(event_type, []):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (event_id=%s)",
                    getattr(callback, "__name__", repr(callback)),
                    event_type,
                    event.event_id,
                )
