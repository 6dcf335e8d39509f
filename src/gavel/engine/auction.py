"""Ascending-price (English) auction for a single lot."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from ..errors import InvalidConfigError, InvalidTransitionError
from .clock import Clock, system_clock
from .events import AuctionEvent, EventEmitter, Handler

logger = logging.getLogger(__name__)

# A successful bid placed with less than this left on the clock triggers
# the configured time extension.
ANTI_SNIPE_WINDOW = timedelta(seconds=60)


class AuctionStatus(Enum):
    PENDING = "pending"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass(frozen=True, slots=True)
class AuctionConfig:
    """Immutable auction parameters.

    Attributes:
        starting_price: Price before any bid is accepted.
        reserve_price: Minimum winning amount. Below it the auction closes unsold.
        bid_increment: Minimum raise over the current price.
        start_time: Earliest instant the auction may be started (timezone-aware).
        end_time: Scheduled close (timezone-aware, after start_time).
        time_extension: Seconds added to the end time when a bid lands inside
            the anti-sniping window. None disables extensions.
    """

    starting_price: float
    reserve_price: float
    bid_increment: float
    start_time: datetime
    end_time: datetime
    time_extension: float | None = None

    def __post_init__(self) -> None:
        for name in ("starting_price", "reserve_price", "bid_increment"):
            if getattr(self, name) < 0:
                raise InvalidConfigError(f"{name} must be non-negative")
        if self.start_time.tzinfo is None or self.end_time.tzinfo is None:
            raise InvalidConfigError("start_time and end_time must be timezone-aware")
        if self.start_time >= self.end_time:
            raise InvalidConfigError("start_time must be before end_time")
        if self.time_extension is not None and self.time_extension <= 0:
            raise InvalidConfigError("time_extension must be positive when set")


@dataclass(frozen=True, slots=True)
class Bid:
    """An accepted bid. Never modified once recorded."""

    bidder_id: str
    amount: float
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class BidResult:
    success: bool
    message: str


@dataclass(frozen=True, slots=True)
class AuctionResult:
    """Outcome of closing an auction. winner is None when unsold."""

    winner: str | None
    final_price: float


class AuctionEngine:
    """Bidding state machine for one English auction.

    Lifecycle: PENDING -> ACTIVE -> ENDED, never backwards.

    Invariants:
    1. current_price equals the latest accepted bid, or starting_price before any bid
    2. Every accepted bid is at least current_price + bid_increment at acceptance
    3. No bidder outbids themselves
    4. Once ENDED, no bid is accepted

    Business rejections come back as BidResult values. Only start() raises.
    """

    def __init__(self, config: AuctionConfig, clock: Clock = system_clock) -> None:
        self._config = config
        self._clock = clock
        self._events = EventEmitter()
        self._lock = threading.RLock()

        self._bids: list[Bid] = []
        self._current_price: float = config.starting_price
        self._status = AuctionStatus.PENDING
        self._end_time: datetime = config.end_time
        self._extension_count: int = 0

    @property
    def config(self) -> AuctionConfig:
        return self._config

    @property
    def end_time(self) -> datetime:
        """Current close time, including any anti-sniping extensions."""
        return self._end_time

    @property
    def extension_count(self) -> int:
        return self._extension_count

    def subscribe(self, kind: AuctionEvent, handler: Handler) -> None:
        self._events.subscribe(kind, handler)

    def unsubscribe(self, kind: AuctionEvent, handler: Handler) -> bool:
        return self._events.unsubscribe(kind, handler)

    def start(self) -> None:
        """Open the auction for bidding.

        Raises InvalidTransitionError if called before the scheduled start
        time or after the auction has ended. Starting an active auction does
        nothing.
        """
        with self._lock:
            if self._status is AuctionStatus.ACTIVE:
                logger.debug("start() on an already active auction ignored")
                return
            if self._status is AuctionStatus.ENDED:
                raise InvalidTransitionError("cannot restart an ended auction")
            if self._clock() < self._config.start_time:
                raise InvalidTransitionError("cannot start before scheduled start time")

            self._status = AuctionStatus.ACTIVE
            logger.info("Auction started at price %s", self._current_price)
            self._events.emit(AuctionEvent.STARTED)

    def place_bid(self, bidder_id: str, amount: float) -> BidResult:
        """Validate and apply a bid. The first failing rule decides the rejection."""
        with self._lock:
            if self._status is not AuctionStatus.ACTIVE:
                return self._reject(bidder_id, amount, "Auction is not active")

            min_bid = self._current_price + self._config.bid_increment
            # Written as a negated >= so NaN amounts are rejected too
            if not amount >= min_bid:
                return self._reject(
                    bidder_id, amount, f"Bid must be at least {_format_amount(min_bid)}"
                )

            highest = self.get_highest_bidder()
            if highest is not None and highest.bidder_id == bidder_id:
                return self._reject(bidder_id, amount, "You are already the highest bidder")

            now = self._clock()
            bid = Bid(bidder_id=bidder_id, amount=amount, timestamp=now)
            self._bids.append(bid)
            self._current_price = amount
            logger.debug("Accepted bid %s from %s", amount, bidder_id)

            extension = self._config.time_extension
            if extension is not None and self._end_time - now < ANTI_SNIPE_WINDOW:
                self._end_time += timedelta(seconds=extension)
                self._extension_count += 1
                logger.info("Late bid extended auction end to %s", self._end_time.isoformat())
                self._events.emit(AuctionEvent.TIME_EXTENDED, self._end_time)

            self._events.emit(AuctionEvent.BID_PLACED, bid)
            self._events.emit(AuctionEvent.PRICE_UPDATED, self._current_price)
            return BidResult(success=True, message="Bid placed successfully")

    def get_highest_bidder(self) -> Bid | None:
        """Highest accepted bid, earliest first among equal amounts. None if no bids."""
        highest: Bid | None = None
        for bid in self._bids:
            if highest is None or bid.amount > highest.amount:
                highest = bid
        return highest

    def end(self) -> AuctionResult:
        """Close the auction and determine the winner.

        May be called repeatedly; the result is recomputed from the bid history.
        """
        with self._lock:
            self._status = AuctionStatus.ENDED
            highest = self.get_highest_bidder()

            if highest is None or highest.amount < self._config.reserve_price:
                result = AuctionResult(winner=None, final_price=0)
            else:
                result = AuctionResult(winner=highest.bidder_id, final_price=highest.amount)

            logger.info("Auction ended: winner=%s final_price=%s", result.winner, result.final_price)
            self._events.emit(AuctionEvent.ENDED, result)
            return result

    def get_bids(self) -> list[Bid]:
        """Copy of the bid history in acceptance order."""
        return list(self._bids)

    def get_current_price(self) -> float:
        return self._current_price

    def get_status(self) -> AuctionStatus:
        return self._status

    def _reject(self, bidder_id: str, amount: float, message: str) -> BidResult:
        logger.debug("Rejected bid %s from %s: %s", amount, bidder_id, message)
        return BidResult(success=False, message=message)


def _format_amount(amount: float) -> str:
    """Render whole amounts without a trailing .0 (110.0 -> "110")."""
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)
