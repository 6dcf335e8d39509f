"""Summary metrics for a completed auction."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import numpy as np

from ..engine.auction import AuctionConfig, AuctionResult, Bid


@dataclass
class AuctionMetrics:
    """Evaluation of one closed auction."""

    sold: bool
    final_price: float
    n_bids: int
    n_bidders: int
    mean_increment: float  # average raise between consecutive accepted bids
    max_increment: float
    reserve_ratio: float  # highest bid / reserve price
    n_extensions: int
    extension_seconds: float  # how far anti-sniping pushed the close


def compute_metrics(
    bids: list[Bid],
    config: AuctionConfig,
    result: AuctionResult,
    final_end_time: datetime,
) -> AuctionMetrics:
    """Compute evaluation metrics from an auction's bid history and outcome."""

    amounts = np.array([b.amount for b in bids], dtype=float)

    # Raises, with the starting price as the baseline for the first bid
    increments = np.diff(np.concatenate([[config.starting_price], amounts]))
    mean_inc = float(np.mean(increments)) if len(increments) > 0 else 0.0
    max_inc = float(np.max(increments)) if len(increments) > 0 else 0.0

    highest = float(np.max(amounts)) if len(amounts) > 0 else 0.0
    reserve_ratio = highest / config.reserve_price if config.reserve_price > 0 else float("inf")

    extension_seconds = (final_end_time - config.end_time).total_seconds()
    if config.time_extension:
        n_extensions = int(round(extension_seconds / config.time_extension))
    else:
        n_extensions = 0

    return AuctionMetrics(
        sold=result.winner is not None,
        final_price=float(result.final_price),
        n_bids=len(bids),
        n_bidders=len({b.bidder_id for b in bids}),
        mean_increment=mean_inc,
        max_increment=max_inc,
        reserve_ratio=reserve_ratio,
        n_extensions=n_extensions,
        extension_seconds=extension_seconds,
    )
