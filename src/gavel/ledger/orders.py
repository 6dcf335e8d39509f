"""Record types for the order ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Side(Enum):
    BUY = "buy"
    SELL = "sell"  # Structural only, never populated


class OrderStatus(Enum):
    PENDING = "pending"
    FILLED = "filled"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Order:
    """Immutable order representation.

    A status change produces a new Order that replaces this one everywhere
    the ledger holds it.

    Attributes:
        order_id: Unique key across all auctions.
        user_id: Identifier of the user who placed the order.
        auction_id: Auction the order was placed against.
        bid_amount: Price offered.
        status: PENDING until filled or cancelled, exactly once.
        timestamp: When the order was recorded.
    """

    order_id: str
    user_id: str
    auction_id: str
    bid_amount: float
    status: OrderStatus
    timestamp: datetime


@dataclass
class OrderBook:
    """Per-auction view over the ledger.

    bids is kept sorted by descending bid_amount. asks is always empty.
    """

    auction_id: str
    timestamp: datetime
    bids: list[Order] = field(default_factory=list)
    asks: list[Order] = field(default_factory=list)
    last_price: float = 0


@dataclass(frozen=True, slots=True)
class DepthLevel:
    """One entry of a price-depth view. Quantity is not aggregated per price."""

    price: float
    quantity: int = 1
    side: Side = Side.BUY
