"""Main simulation entry point.

Runs a batch of simulated English auctions with synthetic bidders,
computes metrics, and generates plots.
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from gavel.engine.auction import AuctionConfig
from gavel.evaluation.metrics import compute_metrics
from gavel.evaluation.visualization import (
    plot_metrics_summary,
    plot_price_depth,
    plot_price_path,
)
from gavel.simulation.bidder_flow import BidderFlowConfig
from gavel.simulation.runner import SimulationConfig, run_auction_simulation


def main():
    parser = argparse.ArgumentParser(description="Run English auction simulations")
    parser.add_argument("--n-auctions", type=int, default=50)
    parser.add_argument("--duration", type=int, default=600, help="scheduled length in seconds")
    parser.add_argument("--starting-price", type=float, default=100.0)
    parser.add_argument("--reserve-price", type=float, default=150.0)
    parser.add_argument("--increment", type=float, default=5.0)
    parser.add_argument("--extension", type=float, default=120.0, help="0 disables anti-sniping")
    parser.add_argument("--n-bidders", type=int, default=20)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output-dir", type=str, default="assets")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print("=" * 60)
    print("GAVEL: English Auction Simulation")
    print("=" * 60)

    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    config = AuctionConfig(
        starting_price=args.starting_price,
        reserve_price=args.reserve_price,
        bid_increment=args.increment,
        start_time=start,
        end_time=start + timedelta(seconds=args.duration),
        time_extension=args.extension or None,
    )

    print(f"\nRunning {args.n_auctions} auctions ({args.n_bidders} bidders each)...")
    runs = []
    for i in range(args.n_auctions):
        run = run_auction_simulation(
            config,
            BidderFlowConfig(n_bidders=args.n_bidders, seed=args.seed + i),
            SimulationConfig(auction_id=f"auction-{i}"),
        )
        runs.append(run)

    metrics = [compute_metrics(r.bids, r.config, r.result, r.final_end_time) for r in runs]

    # Print summary
    n_sold = sum(m.sold for m in metrics)
    sold_prices = [m.final_price for m in metrics if m.sold]
    print("\n" + "=" * 60)
    print("RESULTS SUMMARY")
    print("=" * 60)
    print(f"{'Metric':<25} {'Value':>15}")
    print("-" * 41)
    print(f"{'Auctions sold':<25} {n_sold:>10d}/{len(metrics):<4d}")
    if sold_prices:
        print(f"{'Mean sale price':<25} {sum(sold_prices) / len(sold_prices):>15.2f}")
    print(f"{'Mean bids/auction':<25} {sum(m.n_bids for m in metrics) / len(metrics):>15.2f}")
    print(f"{'Mean increment':<25} {sum(m.mean_increment for m in metrics) / len(metrics):>15.2f}")
    print(f"{'Mean extensions':<25} {sum(m.n_extensions for m in metrics) / len(metrics):>15.2f}")
    rejected = sum(r.stats.bids_rejected for r in runs)
    submitted = sum(r.stats.bids_submitted for r in runs)
    print(f"{'Rejection rate':<25} {rejected / max(submitted, 1):>15.2%}")

    # Generate plots for the first auction and the batch
    print("\nGenerating plots...")
    first = runs[0]
    scheduled = (config.end_time - config.start_time).total_seconds()
    plot_price_path(
        first.elapsed_series,
        first.price_series,
        config.reserve_price,
        scheduled,
        [(t - config.start_time).total_seconds() for t in first.extension_times],
        output_dir / "price_path.png",
    )
    plot_price_depth(
        first.ledger.get_price_depth("auction-0", levels=10),
        output_dir / "price_depth.png",
    )
    plot_metrics_summary(metrics, output_dir / "metrics_summary.png")

    print(f"\nPlots saved to {output_dir}/")
    print("  - price_path.png")
    print("  - price_depth.png")
    print("  - metrics_summary.png")
    print("\nDone!")


if __name__ == "__main__":
    main()
