"""Visualization for simulated auctions."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # non-interactive backend
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from ..ledger.orders import DepthLevel
from .metrics import AuctionMetrics


def set_style():
    """Set publication-quality plot style."""
    sns.set_theme(style="whitegrid", font_scale=1.1)
    plt.rcParams["figure.figsize"] = (10, 6)
    plt.rcParams["figure.dpi"] = 150
    plt.rcParams["savefig.bbox"] = "tight"


PRICE_COLOR = "#2196F3"
RESERVE_COLOR = "#FF5722"


def plot_price_path(
    elapsed: np.ndarray,
    prices: np.ndarray,
    reserve_price: float,
    scheduled_end_seconds: float,
    extension_seconds: list[float] | None = None,
    output_path: str | Path = "results/price_path.png",
) -> None:
    """Plot the current price over time with reserve and extension markers."""
    set_style()
    fig, ax = plt.subplots()

    ax.step(elapsed, prices, where="post", color=PRICE_COLOR, label="Current price", linewidth=1.5)
    ax.axhline(y=reserve_price, color=RESERVE_COLOR, linestyle="--", alpha=0.7, label="Reserve")
    ax.axvline(x=scheduled_end_seconds, color="gray", linestyle=":", alpha=0.7, label="Scheduled end")
    for i, t in enumerate(extension_seconds or []):
        ax.axvline(x=t, color="gray", alpha=0.3, linewidth=0.8, label="Extension" if i == 0 else None)

    ax.set_xlabel("Seconds since start")
    ax.set_ylabel("Price")
    ax.set_title("Ascending Auction Price Path")
    ax.legend()

    plt.savefig(output_path)
    plt.close()


def plot_price_depth(
    depth: list[DepthLevel],
    output_path: str | Path = "results/price_depth.png",
) -> None:
    """Horizontal bars for each order at the top of the bid side."""
    set_style()
    fig, ax = plt.subplots(figsize=(8, 5))

    prices = [d.price for d in depth]
    ranks = np.arange(len(depth))
    ax.barh(ranks, prices, color=PRICE_COLOR, alpha=0.8, edgecolor="white")
    ax.set_yticks(ranks)
    ax.set_yticklabels([f"#{r + 1}" for r in ranks])
    ax.invert_yaxis()
    ax.set_xlabel("Bid amount")
    ax.set_title("Order Book Depth (bid side)")

    plt.savefig(output_path)
    plt.close()


def plot_metrics_summary(
    metrics: list[AuctionMetrics],
    output_path: str | Path = "results/metrics_summary.png",
) -> None:
    """Distributions of key metrics across many simulated auctions."""
    set_style()

    panels = [
        ("Final Price", [m.final_price for m in metrics]),
        ("Bids", [m.n_bids for m in metrics]),
        ("Mean Increment", [m.mean_increment for m in metrics]),
        ("Extensions", [m.n_extensions for m in metrics]),
    ]

    fig, axes = plt.subplots(1, len(panels), figsize=(14, 4))
    for ax, (name, values) in zip(axes, panels):
        ax.hist(values, bins=20, color=PRICE_COLOR, alpha=0.7, edgecolor="white")
        ax.set_title(name, fontsize=10, fontweight="bold")

    sold = sum(m.sold for m in metrics)
    fig.suptitle(f"Auction Outcomes ({sold}/{len(metrics)} sold)", fontsize=12, fontweight="bold")
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close()
