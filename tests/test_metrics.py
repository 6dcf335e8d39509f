"""Tests for auction evaluation metrics."""

from datetime import datetime, timedelta, timezone

import numpy as np

from gavel.engine.auction import AuctionConfig, AuctionResult, Bid
from gavel.evaluation.metrics import compute_metrics

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _config(time_extension: float | None = 60) -> AuctionConfig:
    return AuctionConfig(100, 150, 10, T0, T0 + timedelta(seconds=600), time_extension)


def _bids(*pairs) -> list[Bid]:
    return [Bid(bidder_id=b, amount=a, timestamp=T0) for b, a in pairs]


class TestMetrics:
    def test_compute_metrics_basic(self):
        config = _config()
        bids = _bids(("A", 110), ("B", 130), ("A", 140), ("C", 200))
        result = AuctionResult(winner="C", final_price=200)

        metrics = compute_metrics(bids, config, result, config.end_time + timedelta(seconds=120))

        assert metrics.sold is True
        assert metrics.final_price == 200.0
        assert metrics.n_bids == 4
        assert metrics.n_bidders == 3
        assert np.isclose(metrics.mean_increment, 25.0)
        assert metrics.max_increment == 60.0
        assert np.isclose(metrics.reserve_ratio, 200 / 150)
        assert metrics.n_extensions == 2
        assert metrics.extension_seconds == 120.0

    def test_metrics_no_bids(self):
        config = _config()
        metrics = compute_metrics([], config, AuctionResult(None, 0), config.end_time)
        assert metrics.sold is False
        assert metrics.n_bids == 0
        assert metrics.mean_increment == 0.0
        assert metrics.max_increment == 0.0
        assert metrics.reserve_ratio == 0.0
        assert metrics.n_extensions == 0

    def test_metrics_without_extension_config(self):
        config = _config(time_extension=None)
        bids = _bids(("A", 110))
        metrics = compute_metrics(bids, config, AuctionResult(None, 0), config.end_time)
        assert metrics.n_extensions == 0
        assert metrics.extension_seconds == 0.0
        assert metrics.sold is False
