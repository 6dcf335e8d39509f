"""Benchmark order ledger throughput."""

import time

from gavel.ledger.order_ledger import OrderLedger


def main():
    ledger = OrderLedger()

    n_orders = 100_000
    n_auctions = 100
    print(f"Benchmarking order ledger with {n_orders:,} orders over {n_auctions} auctions...")

    start = time.perf_counter()

    for i in range(n_orders):
        auction_id = f"auction-{i % n_auctions}"
        ledger.add_bid(f"order-{i}", f"user-{i % 997}", auction_id, 100.0 + (i * 7919) % 500)
        if i % 10 == 0:
            ledger.cancel_order(f"order-{i}")
        elif i % 25 == 0:
            ledger.fill_order(f"order-{i}")

    elapsed = time.perf_counter() - start
    throughput = n_orders / elapsed

    depth_start = time.perf_counter()
    for a in range(n_auctions):
        ledger.get_price_depth(f"auction-{a}", levels=10)
    depth_elapsed = time.perf_counter() - depth_start

    print(f"\nResults:")
    print(f"  Time: {elapsed:.2f}s")
    print(f"  Throughput: {throughput:,.0f} orders/sec")
    print(f"  Depth queries: {n_auctions / depth_elapsed:,.0f} books/sec")
    print(f"  Top bid (auction-0): {ledger.get_top_bid('auction-0'):,.2f}")


if __name__ == "__main__":
    main()
