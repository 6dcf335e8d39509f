"""Tests for the session that drives an auction and the ledger together."""

from datetime import datetime, timedelta, timezone

from gavel.engine.auction import AuctionConfig, AuctionEngine
from gavel.engine.clock import ManualClock
from gavel.engine.session import AuctionSession
from gavel.ledger.order_ledger import OrderLedger
from gavel.ledger.orders import OrderStatus

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _make_session(reserve_price: float = 150) -> AuctionSession:
    clock = ManualClock(T0)
    config = AuctionConfig(100, reserve_price, 10, T0, T0 + timedelta(hours=1))
    engine = AuctionEngine(config, clock=clock)
    engine.start()
    return AuctionSession("auc1", engine, OrderLedger(clock=clock))


class TestAuctionSession:
    def test_accepted_bid_is_recorded(self):
        session = _make_session()
        result, order = session.submit_bid("A", 110)
        assert result.success is True
        assert order is not None
        assert order.order_id == "auc1-0"
        assert session.ledger.get_top_bid("auc1") == 110
        assert session.stats.bids_accepted == 1

    def test_rejected_bid_is_not_recorded(self):
        session = _make_session()
        result, order = session.submit_bid("A", 105)
        assert result.success is False
        assert order is None
        assert session.ledger.get_top_bid("auc1") == 0
        assert session.stats.bids_rejected == 1
        assert session.stats.bids_submitted == 1

    def test_order_ids_sequential(self):
        session = _make_session()
        session.submit_bid("A", 110)
        session.submit_bid("A", 115)  # rejected, consumes no id
        session.submit_bid("B", 120)
        assert session.order_ids == ["auc1-0", "auc1-1"]

    def test_close_fills_winner(self):
        session = _make_session()
        session.submit_bid("A", 110)
        session.submit_bid("B", 160)
        result = session.close()
        assert result.winner == "B"
        assert session.ledger.get_order("auc1-1").status is OrderStatus.FILLED
        assert session.ledger.get_order("auc1-0").status is OrderStatus.PENDING
        assert session.ledger.get_snapshot("auc1").last_price == 160
        assert session.stats.orders_filled == 1

    def test_close_without_winner_fills_nothing(self):
        session = _make_session()
        session.submit_bid("A", 140)
        result = session.close()
        assert result.winner is None
        assert session.ledger.get_order("auc1-0").status is OrderStatus.PENDING
        assert session.stats.orders_filled == 0

    def test_close_twice_fills_once(self):
        session = _make_session()
        session.submit_bid("A", 200)
        session.close()
        session.close()
        assert session.stats.orders_filled == 1

    def test_direct_engine_bid_does_not_misalign_orders(self):
        session = _make_session()
        session.submit_bid("A", 110)
        assert session.engine.place_bid("B", 120).success  # bypasses the ledger
        session.submit_bid("C", 160)
        result = session.close()
        assert result.winner == "C"
        assert session.ledger.get_order("auc1-1").user_id == "C"
        assert session.ledger.get_order("auc1-1").status is OrderStatus.FILLED
        assert session.ledger.get_order("auc1-0").status is OrderStatus.PENDING

    def test_winner_outside_session_fills_nothing(self):
        session = _make_session()
        session.submit_bid("A", 110)
        session.engine.place_bid("B", 200)
        result = session.close()
        assert result.winner == "B"
        assert session.stats.orders_filled == 0
        assert session.ledger.get_order("auc1-0").status is OrderStatus.PENDING
