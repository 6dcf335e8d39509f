"""Run a single simulated auction end to end."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

import numpy as np

from ..engine.auction import AuctionConfig, AuctionEngine, AuctionResult, Bid
from ..engine.clock import ManualClock
from ..engine.events import AuctionEvent
from ..engine.session import AuctionSession, SessionStats
from ..ledger.order_ledger import OrderLedger
from .bidder_flow import BidderFlow, BidderFlowConfig

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Simulation loop settings."""

    step_seconds: float = 1.0
    max_steps: int = 100_000  # guards against endless extension chains
    auction_id: str = "sim-auction"


@dataclass
class SimulationRun:
    """Everything recorded while running one auction."""

    result: AuctionResult
    bids: list[Bid]
    stats: SessionStats
    config: AuctionConfig
    final_end_time: datetime
    extension_times: list[datetime] = field(default_factory=list)
    price_series: np.ndarray = field(default_factory=lambda: np.zeros(0))
    elapsed_series: np.ndarray = field(default_factory=lambda: np.zeros(0))
    ledger: OrderLedger | None = None


def run_auction_simulation(
    auction_config: AuctionConfig,
    flow_config: BidderFlowConfig | None = None,
    sim_config: SimulationConfig | None = None,
    ledger: OrderLedger | None = None,
) -> SimulationRun:
    """Drive one auction with synthetic bidders until its (extended) end time.

    Returns a SimulationRun with the outcome and per-step price series.
    """
    sim = sim_config or SimulationConfig()
    clock = ManualClock(auction_config.start_time)
    engine = AuctionEngine(auction_config, clock=clock)
    ledger = ledger if ledger is not None else OrderLedger(clock=clock)
    session = AuctionSession(sim.auction_id, engine, ledger)
    flow = BidderFlow(flow_config or BidderFlowConfig(), auction_config.starting_price)

    extension_times: list[datetime] = []
    engine.subscribe(AuctionEvent.TIME_EXTENDED, lambda _end: extension_times.append(clock()))

    engine.start()
    prices: list[float] = [engine.get_current_price()]
    elapsed: list[float] = [0.0]

    steps = 0
    while clock() < engine.end_time and steps < sim.max_steps:
        highest = engine.get_highest_bidder()
        events = flow.generate_bids(
            engine.get_current_price(),
            auction_config.bid_increment,
            highest.bidder_id if highest is not None else None,
            sim.step_seconds,
        )
        for ev in events:
            session.submit_bid(ev.bidder_id, ev.amount)

        clock.advance(sim.step_seconds)
        steps += 1
        prices.append(engine.get_current_price())
        elapsed.append((clock() - auction_config.start_time).total_seconds())

    if steps >= sim.max_steps:
        logger.warning("Simulation stopped after %d steps before the auction closed", steps)

    result = session.close()
    return SimulationRun(
        result=result,
        bids=engine.get_bids(),
        stats=session.stats,
        config=auction_config,
        final_end_time=engine.end_time,
        extension_times=extension_times,
        price_series=np.array(prices),
        elapsed_series=np.array(elapsed),
        ledger=ledger,
    )
