"""Order ledger with per-auction books sorted by price."""

from __future__ import annotations

import bisect
import logging
import math
import threading
from dataclasses import replace

from ..engine.clock import Clock, system_clock
from .orders import DepthLevel, Order, OrderBook, OrderStatus, Side
from .store import InMemoryStore, Store

logger = logging.getLogger(__name__)


class OrderLedger:
    """Bookkeeping over orders placed against any number of auctions.

    This is a recording API: orders are not validated against auction rules.
    Callers that also run an AuctionEngine validate there first.

    Invariants (enforced and verified):
    1. Each book's bids are sorted by descending bid_amount after every mutation
    2. An order leaves PENDING at most once
    3. Cancelled orders are absent from their book; filled orders stay in it
    4. Asks are never populated
    """

    def __init__(
        self,
        orders: Store[str, Order] | None = None,
        books: Store[str, OrderBook] | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self._orders: Store[str, Order] = orders if orders is not None else InMemoryStore()
        self._books: Store[str, OrderBook] = books if books is not None else InMemoryStore()
        self._clock = clock

        # One lock per auction id so unrelated auctions never contend
        self._auction_locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def get_order_book(self, auction_id: str) -> OrderBook:
        """Book for auction_id, created empty on first reference.

        Returns the live record, not a copy. Use get_snapshot() for reads
        that must not alias ledger state.
        """
        with self._lock_for(auction_id):
            book = self._books.get(auction_id)
            if book is None:
                book = OrderBook(auction_id=auction_id, timestamp=self._clock())
                self._books.put(auction_id, book)
            return book

    def add_bid(self, order_id: str, user_id: str, auction_id: str, bid_amount: float) -> Order:
        """Record a pending buy order and insert it at its price rank.

        Amounts must be finite; a NaN would break the descending sort.
        """
        assert math.isfinite(bid_amount), "Bid amount must be finite"

        order = Order(
            order_id=order_id,
            user_id=user_id,
            auction_id=auction_id,
            bid_amount=bid_amount,
            status=OrderStatus.PENDING,
            timestamp=self._clock(),
        )

        with self._lock_for(auction_id):
            book = self.get_order_book(auction_id)
            # Descending order: bisect on negated amounts, after any equal ones
            pos = bisect.bisect_right(book.bids, -bid_amount, key=lambda o: -o.bid_amount)
            book.bids.insert(pos, order)
            self._orders.put(order_id, order)

        logger.debug("Recorded order %s: %s bids %s on %s", order_id, user_id, bid_amount, auction_id)
        return order

    def get_order(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    def orders_for(self, auction_id: str) -> list[Order]:
        """All orders recorded against an auction, in any status."""
        return [o for o in self._orders.values() if o.auction_id == auction_id]

    def get_top_bid(self, auction_id: str) -> float:
        """Highest bid amount in the book, or 0 if it has no bids."""
        book = self.get_order_book(auction_id)
        return book.bids[0].bid_amount if book.bids else 0

    def fill_order(self, order_id: str) -> bool:
        """Mark a pending order filled and record its price as the last trade.

        Returns False if the order is unknown or no longer pending.
        """
        order = self._orders.get(order_id)
        if order is None:
            return False

        with self._lock_for(order.auction_id):
            # Re-read under the auction lock; a concurrent call may have won
            order = self._orders.get(order_id)
            if order is None or order.status is not OrderStatus.PENDING:
                return False

            filled = replace(order, status=OrderStatus.FILLED)
            book = self.get_order_book(order.auction_id)
            self._swap(book.bids, order, filled)
            self._orders.put(order_id, filled)
            book.last_price = filled.bid_amount
            book.timestamp = self._clock()

        logger.info("Filled order %s at %s on %s", order_id, filled.bid_amount, filled.auction_id)
        return True

    def cancel_order(self, order_id: str) -> bool:
        """Cancel a pending order and drop it from its book.

        The cancelled record stays retrievable through get_order().
        Returns False if the order is unknown or no longer pending.
        """
        order = self._orders.get(order_id)
        if order is None:
            return False

        with self._lock_for(order.auction_id):
            order = self._orders.get(order_id)
            if order is None or order.status is not OrderStatus.PENDING:
                return False

            self._orders.put(order_id, replace(order, status=OrderStatus.CANCELLED))
            book = self.get_order_book(order.auction_id)
            book.bids[:] = [o for o in book.bids if o.order_id != order_id]
            book.asks[:] = [o for o in book.asks if o.order_id != order_id]

        logger.debug("Cancelled order %s on %s", order_id, order.auction_id)
        return True

    def get_price_depth(self, auction_id: str, levels: int = 10) -> list[DepthLevel]:
        """Top `levels` bids, one entry per order. Ask depth is never produced."""
        book = self.get_order_book(auction_id)
        with self._lock_for(auction_id):
            return [
                DepthLevel(price=o.bid_amount, quantity=1, side=Side.BUY)
                for o in book.bids[:max(levels, 0)]
            ]

    def get_snapshot(self, auction_id: str) -> OrderBook:
        """Copy of the book with its own bid and ask lists.

        Orders are immutable, so nothing reachable from the copy can change
        ledger state.
        """
        book = self.get_order_book(auction_id)
        with self._lock_for(auction_id):
            return replace(book, bids=list(book.bids), asks=list(book.asks))

    def _lock_for(self, auction_id: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._auction_locks.get(auction_id)
            if lock is None:
                lock = self._auction_locks[auction_id] = threading.RLock()
            return lock

    @staticmethod
    def _swap(orders: list[Order], old: Order, new: Order) -> None:
        """Replace `old` with `new` in place, keeping its position."""
        for i, o in enumerate(orders):
            if o is old:
                orders[i] = new
                return
