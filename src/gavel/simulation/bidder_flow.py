"""Synthetic bidder populations."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class BidderFlowConfig:
    """Configuration for bid flow generation."""

    n_bidders: int = 20
    arrival_rate: float = 0.5  # bid attempts per second, whole population
    valuation_multiple: float = 1.6  # median valuation / starting price
    valuation_sigma: float = 0.25  # lognormal dispersion of valuations
    jump_probability: float = 0.6  # geometric parameter for extra increments
    seed: int | None = None


@dataclass
class BidEvent:
    """A generated bid attempt to submit to the auction."""

    bidder_id: str
    amount: float


class BidderFlow:
    """Generates bid attempts from a population with private valuations.

    Valuations are lognormal around valuation_multiple * starting_price.
    Attempts arrive as a Poisson process. A bidder raises the minimum
    acceptable bid by a geometric number of extra increments, never beyond
    its own valuation, and stays silent once the price passes it.
    """

    def __init__(self, config: BidderFlowConfig, starting_price: float) -> None:
        assert config.n_bidders > 0, "Need at least one bidder"
        self.config = config
        self.rng = np.random.default_rng(config.seed)
        self.bidder_ids = [f"bidder-{i}" for i in range(config.n_bidders)]
        self.valuations: np.ndarray = starting_price * self.rng.lognormal(
            mean=np.log(config.valuation_multiple),
            sigma=config.valuation_sigma,
            size=config.n_bidders,
        )

    def generate_bids(
        self,
        current_price: float,
        bid_increment: float,
        highest_bidder: str | None,
        dt: float,
    ) -> list[BidEvent]:
        """Generate bid attempts for one time step.

        Args:
            current_price: Auction price at the start of the step.
            bid_increment: Minimum raise over the current price.
            highest_bidder: Current leader, who does not bid against themselves.
            dt: Time step duration in seconds.

        Returns:
            List of BidEvent, in arrival order.
        """
        events: list[BidEvent] = []
        cfg = self.config
        min_bid = current_price + bid_increment

        n_attempts = self.rng.poisson(cfg.arrival_rate * dt)
        for _ in range(n_attempts):
            i = int(self.rng.integers(cfg.n_bidders))
            bidder_id = self.bidder_ids[i]
            valuation = float(self.valuations[i])
            if bidder_id == highest_bidder or valuation < min_bid:
                continue

            extra = int(self.rng.geometric(cfg.jump_probability)) - 1
            amount = min(min_bid + extra * bid_increment, valuation)
            events.append(BidEvent(bidder_id=bidder_id, amount=round(amount, 2)))

        return events

    def max_valuation(self) -> float:
        return float(np.max(self.valuations))
