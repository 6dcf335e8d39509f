"""Synchronous in-process notifications emitted by the auction engine."""

from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class AuctionEvent(Enum):
    """Notification kinds and the payload each carries.

    STARTED: None
    BID_PLACED: the accepted Bid
    PRICE_UPDATED: the new current price
    TIME_EXTENDED: the new end time
    ENDED: the AuctionResult
    """

    STARTED = "started"
    BID_PLACED = "bidPlaced"
    PRICE_UPDATED = "priceUpdated"
    TIME_EXTENDED = "timeExtended"
    ENDED = "ended"


class EventEmitter:
    """Register/unregister handlers per event kind and deliver events in order.

    Delivery is synchronous, in subscription order. Nothing is persisted or
    retried, so handlers must not be the only record of what happened.
    """

    def __init__(self) -> None:
        self._handlers: dict[AuctionEvent, list[Handler]] = defaultdict(list)

    def subscribe(self, kind: AuctionEvent, handler: Handler) -> None:
        self._handlers[kind].append(handler)

    def unsubscribe(self, kind: AuctionEvent, handler: Handler) -> bool:
        """Remove a handler. Returns True if it was registered."""
        handlers = self._handlers.get(kind)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def handler_count(self, kind: AuctionEvent) -> int:
        return len(self._handlers.get(kind, ()))

    def emit(self, kind: AuctionEvent, payload: Any = None) -> None:
        # Snapshot so handlers may unsubscribe themselves during delivery.
        for handler in list(self._handlers.get(kind, ())):
            try:
                handler(payload)
            except Exception:
                logger.exception("Handler %r failed for %s event", handler, kind.value)
