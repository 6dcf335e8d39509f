"""Tests for bidder flow generation and the simulation runner."""

from datetime import datetime, timedelta, timezone

import numpy as np

from gavel.engine.auction import AuctionConfig
from gavel.ledger.orders import OrderStatus
from gavel.simulation.bidder_flow import BidderFlow, BidderFlowConfig
from gavel.simulation.runner import SimulationConfig, run_auction_simulation

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _config(time_extension: float | None = 120, duration: float = 600) -> AuctionConfig:
    return AuctionConfig(
        starting_price=100.0,
        reserve_price=150.0,
        bid_increment=5.0,
        start_time=T0,
        end_time=T0 + timedelta(seconds=duration),
        time_extension=time_extension,
    )


class TestBidderFlow:
    def test_poisson_arrivals(self):
        """Mean attempts per step should be close to arrival_rate * dt while prices allow bidding."""
        cfg = BidderFlowConfig(arrival_rate=2.0, valuation_multiple=100.0, seed=42)
        flow = BidderFlow(cfg, starting_price=100.0)
        total = 0
        n_steps = 2000
        for _ in range(n_steps):
            total += len(flow.generate_bids(100.0, 1.0, None, dt=1.0))
        expected = cfg.arrival_rate * n_steps
        assert abs(total - expected) / expected < 0.1

    def test_bids_respect_minimum_and_valuation(self):
        flow = BidderFlow(BidderFlowConfig(arrival_rate=20.0, seed=7), starting_price=100.0)
        valuations = dict(zip(flow.bidder_ids, flow.valuations))
        for _ in range(200):
            for ev in flow.generate_bids(120.0, 5.0, None, dt=1.0):
                assert ev.amount >= 125.0 - 0.005
                assert ev.amount <= valuations[ev.bidder_id] + 0.005

    def test_leader_does_not_bid(self):
        flow = BidderFlow(BidderFlowConfig(n_bidders=1, arrival_rate=10.0, seed=1), 100.0)
        leader = flow.bidder_ids[0]
        for _ in range(50):
            assert flow.generate_bids(100.0, 1.0, leader, dt=1.0) == []

    def test_silent_above_all_valuations(self):
        flow = BidderFlow(BidderFlowConfig(arrival_rate=10.0, seed=3), 100.0)
        price = flow.max_valuation() + 1.0
        for _ in range(50):
            assert flow.generate_bids(price, 1.0, None, dt=1.0) == []

    def test_deterministic_seed(self):
        flow1 = BidderFlow(BidderFlowConfig(seed=123), 100.0)
        flow2 = BidderFlow(BidderFlowConfig(seed=123), 100.0)
        np.testing.assert_array_equal(flow1.valuations, flow2.valuations)
        assert flow1.generate_bids(100.0, 5.0, None, 10.0) == flow2.generate_bids(100.0, 5.0, None, 10.0)


class TestRunner:
    def test_run_closes_auction(self):
        run = run_auction_simulation(_config(), BidderFlowConfig(seed=42))
        assert run.stats.bids_accepted == len(run.bids)
        assert run.stats.bids_submitted == run.stats.bids_accepted + run.stats.bids_rejected
        assert run.final_end_time >= run.config.end_time
        assert len(run.price_series) == len(run.elapsed_series)

    def test_price_series_non_decreasing(self):
        run = run_auction_simulation(_config(), BidderFlowConfig(seed=11))
        assert np.all(np.diff(run.price_series) >= 0)
        assert run.price_series[0] == 100.0

    def test_winner_matches_ledger(self):
        run = run_auction_simulation(
            _config(),
            BidderFlowConfig(seed=5, valuation_multiple=3.0),
            SimulationConfig(auction_id="sim-1"),
        )
        assert run.result.winner is not None
        assert run.result.final_price >= 150.0
        book = run.ledger.get_snapshot("sim-1")
        assert book.last_price == run.result.final_price
        filled = [o for o in run.ledger.orders_for("sim-1") if o.status is OrderStatus.FILLED]
        assert len(filled) == 1
        assert filled[0].user_id == run.result.winner

    def test_no_extension_keeps_schedule(self):
        run = run_auction_simulation(_config(time_extension=None), BidderFlowConfig(seed=9))
        assert run.final_end_time == run.config.end_time
        assert run.extension_times == []

    def test_extensions_recorded(self):
        run = run_auction_simulation(
            _config(time_extension=30),
            BidderFlowConfig(seed=2, arrival_rate=2.0, valuation_multiple=50.0),
            SimulationConfig(max_steps=5000),
        )
        expected = run.config.end_time + timedelta(seconds=30 * len(run.extension_times))
        assert len(run.extension_times) > 0
        assert run.final_end_time == expected
