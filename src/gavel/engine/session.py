"""Caller-side driver that keeps an auction and the order ledger in step."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from ..ledger.order_ledger import OrderLedger
from ..ledger.orders import Order
from .auction import AuctionEngine, AuctionResult, Bid, BidResult
from .events import AuctionEvent

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    """Running statistics of an auction session."""

    bids_submitted: int = 0
    bids_accepted: int = 0
    bids_rejected: int = 0
    orders_filled: int = 0


class AuctionSession:
    """Validates bids against an AuctionEngine, then records them in an OrderLedger.

    The engine and ledger stay independent; this is the glue a transport
    layer would otherwise provide. Only accepted bids reach the ledger.
    Orders are keyed by the accepted Bid, so bids placed on the engine
    directly are simply not in the ledger.
    """

    def __init__(self, auction_id: str, engine: AuctionEngine, ledger: OrderLedger) -> None:
        self.auction_id = auction_id
        self.engine = engine
        self.ledger = ledger
        self.stats = SessionStats()
        self._next_order_seq: int = 0
        self._order_by_bid: dict[int, str] = {}  # id(bid) -> order id; the engine keeps bids alive

        # BID_PLACED is emitted on the thread that called place_bid
        self._accepted = threading.local()
        engine.subscribe(AuctionEvent.BID_PLACED, self._on_bid_placed)

    def submit_bid(self, bidder_id: str, amount: float) -> tuple[BidResult, Order | None]:
        """Place a bid and, if accepted, record it. Returns (result, order or None)."""
        self.stats.bids_submitted += 1
        self._accepted.bid = None
        result = self.engine.place_bid(bidder_id, amount)
        if not result.success:
            self.stats.bids_rejected += 1
            return result, None

        bid: Bid = self._accepted.bid
        order_id = f"{self.auction_id}-{self._next_order_seq}"
        self._next_order_seq += 1
        order = self.ledger.add_bid(order_id, bidder_id, self.auction_id, amount)
        self._order_by_bid[id(bid)] = order_id
        self.stats.bids_accepted += 1
        return result, order

    def close(self) -> AuctionResult:
        """End the auction and fill the winning order, if there is a winner."""
        result = self.engine.end()
        if result.winner is None:
            return result

        highest = self.engine.get_highest_bidder()
        order_id = self._order_by_bid.get(id(highest))
        if order_id is None:
            logger.warning("Winning bid by %s was not placed through this session", result.winner)
        elif self.ledger.fill_order(order_id):
            self.stats.orders_filled += 1
        else:
            logger.warning("Winning order %s was not pending", order_id)
        return result

    @property
    def order_ids(self) -> list[str]:
        """Recorded order ids in acceptance order."""
        return list(self._order_by_bid.values())

    def _on_bid_placed(self, bid: Bid) -> None:
        self._accepted.bid = bid
