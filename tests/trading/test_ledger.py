"""Tests for the trade ledger."""

import dataclasses
import threading

import pytest

from blitz_markets.common.errors import InvalidProposalError
from blitz_markets.trading.interfaces import TradeStatus, settle_pnl
from blitz_markets.trading.ledger import RetentionPolicy, TradeLedger


class TestSettlePnl:
    """Tests for settle_pnl()."""

    def test_win(self):
        """Winning pays stake times net odds."""
        assert settle_pnl(100.0, 2.5, TradeStatus.WIN) == 150.0
        assert settle_pnl(200.0, 1.75, TradeStatus.WIN) == 150.0

    def test_loss(self):
        """Losing costs the stake."""
        assert settle_pnl(100.0, 2.5, TradeStatus.LOSS) == -100.0

    def test_pending_rejected(self):
        """PENDING has no P&L."""
        with pytest.raises(ValueError):
            settle_pnl(100.0, 2.0, TradeStatus.PENDING)


class TestRecordTrade:
    """Tests for TradeLedger.record_trade."""

    def test_record_is_visible(self, ledger: TradeLedger, make_proposal, clock):
        """A recorded trade is immediately readable."""
        trade = ledger.record_trade(make_proposal(), comment="Let's go")

        assert trade.status == TradeStatus.PENDING
        assert trade.realized_pnl is None
        assert trade.comment == "Let's go"
        assert trade.created_at == clock()
        assert ledger.get_trade(trade.id) == trade
        assert ledger.recent_trades() == [trade]
        assert len(ledger) == 1

    def test_ids_unique_and_sequenced(self, ledger: TradeLedger, make_proposal):
        """Each trade gets a fresh id and increasing sequence."""
        trades = [ledger.record_trade(make_proposal()) for _ in range(5)]

        assert len({t.id for t in trades}) == 5
        assert [t.sequence for t in trades] == [1, 2, 3, 4, 5]

    def test_unknown_bot_rejected(self, ledger: TradeLedger, make_proposal):
        """Trades for unregistered bots never enter the ledger."""
        with pytest.raises(InvalidProposalError):
            ledger.record_trade(make_proposal(bot_id="bot-unknown"))
        assert len(ledger) == 0

    def test_version_increments(self, ledger: TradeLedger, make_proposal):
        """Every mutation bumps the version."""
        start = ledger.version
        trade = ledger.record_trade(make_proposal())
        after_record = ledger.version
        ledger.resolve_trade(trade.id, TradeStatus.WIN)

        assert after_record > start
        assert ledger.version > after_record


class TestResolveTrade:
    """Tests for TradeLedger.resolve_trade."""

    def test_resolve_win(self, ledger: TradeLedger, make_proposal, clock):
        """Resolution sets status, P&L and timestamp."""
        trade = ledger.record_trade(make_proposal(stake=100.0, odds=2.5))
        clock.advance(minutes=5)

        resolved = ledger.resolve_trade(trade.id, TradeStatus.WIN)

        assert resolved is not None
        assert resolved.status == TradeStatus.WIN
        assert resolved.realized_pnl == 150.0
        assert resolved.resolved_at == clock()
        assert resolved.id == trade.id

    def test_resolve_is_idempotent(self, ledger: TradeLedger, make_proposal):
        """A second resolution returns the first result unchanged."""
        trade = ledger.record_trade(make_proposal())

        first = ledger.resolve_trade(trade.id, TradeStatus.LOSS)
        second = ledger.resolve_trade(trade.id, TradeStatus.WIN)

        assert second == first
        assert second.status == TradeStatus.LOSS
        assert second.realized_pnl == -100.0

    def test_transition_reports_change(self, ledger: TradeLedger, make_proposal):
        """Only the first transition reports a change."""
        trade = ledger.record_trade(make_proposal())

        assert ledger.transition(trade.id, TradeStatus.WIN)[1] is True
        assert ledger.transition(trade.id, TradeStatus.WIN)[1] is False

    def test_unknown_trade(self, ledger: TradeLedger):
        """Unknown ids resolve to None."""
        assert ledger.resolve_trade("nope", TradeStatus.WIN) is None
        assert ledger.transition("nope", TradeStatus.WIN) == (None, False)

    def test_pending_outcome_rejected(self, ledger: TradeLedger, make_proposal):
        """Trades cannot be resolved back to PENDING."""
        trade = ledger.record_trade(make_proposal())
        with pytest.raises(ValueError):
            ledger.resolve_trade(trade.id, TradeStatus.PENDING)

    def test_snapshots_are_immutable(self, ledger: TradeLedger, make_proposal):
        """Held snapshots neither change nor can be changed."""
        trade = ledger.record_trade(make_proposal())
        ledger.resolve_trade(trade.id, TradeStatus.WIN)

        assert trade.status == TradeStatus.PENDING
        with pytest.raises(dataclasses.FrozenInstanceError):
            trade.status = TradeStatus.LOSS  # type: ignore[misc]
        assert ledger.get_trade(trade.id).status == TradeStatus.WIN


class TestQueries:
    """Tests for ledger read operations."""

    def test_recent_trades_newest_first(self, ledger: TradeLedger, make_proposal):
        """Recent trades come back newest first, capped by limit."""
        trades = [ledger.record_trade(make_proposal()) for _ in range(5)]

        assert ledger.recent_trades(limit=3) == [trades[4], trades[3], trades[2]]
        assert ledger.recent_trades(limit=0) == []
        assert len(ledger.recent_trades(limit=50)) == 5

    def test_trades_for_bot(self, ledger: TradeLedger, make_proposal):
        """Per-bot view preserves recording order."""
        a1 = ledger.record_trade(make_proposal(bot_id="pizzashack"))
        ledger.record_trade(make_proposal(bot_id="pizzashack-conservative"))
        a2 = ledger.record_trade(make_proposal(bot_id="pizzashack"))

        assert ledger.trades_for_bot("pizzashack") == [a1, a2]
        assert ledger.trades_for_bot("bot-unknown") == []

    def test_pending_trades_oldest_first(self, ledger: TradeLedger, make_proposal):
        """Pending view skips resolved trades and honors the cap."""
        trades = [ledger.record_trade(make_proposal()) for _ in range(4)]
        ledger.resolve_trade(trades[1].id, TradeStatus.WIN)

        assert [t.id for t in ledger.pending_trades()] == [trades[0].id, trades[2].id, trades[3].id]
        assert [t.id for t in ledger.pending_trades(limit=2)] == [trades[0].id, trades[2].id]

    def test_clear(self, ledger: TradeLedger, make_proposal):
        """Clear drops everything."""
        trade = ledger.record_trade(make_proposal())
        ledger.clear()

        assert len(ledger) == 0
        assert ledger.get_trade(trade.id) is None


class TestRetention:
    """Tests for the retention policy."""

    def test_max_trades_evicts_oldest(self, registry, clock, make_proposal):
        """Only the newest max_trades are kept."""
        ledger = TradeLedger(registry, RetentionPolicy(max_trades=3), clock=clock)
        trades = [ledger.record_trade(make_proposal()) for _ in range(5)]

        assert len(ledger) == 3
        assert ledger.get_trade(trades[0].id) is None
        assert ledger.get_trade(trades[1].id) is None
        assert [t.id for t in ledger.all_trades()] == [t.id for t in trades[2:]]

    def test_index_survives_eviction(self, registry, clock, make_proposal):
        """Retained trades remain resolvable after eviction."""
        ledger = TradeLedger(registry, RetentionPolicy(max_trades=2), clock=clock)
        trades = [ledger.record_trade(make_proposal()) for _ in range(4)]

        resolved = ledger.resolve_trade(trades[3].id, TradeStatus.WIN)

        assert resolved is not None
        assert resolved.status == TradeStatus.WIN
        assert ledger.resolve_trade(trades[0].id, TradeStatus.WIN) is None

    def test_max_age_evicts_stale(self, registry, clock, make_proposal):
        """Trades older than the age bound are dropped on the next write."""
        ledger = TradeLedger(
            registry, RetentionPolicy(max_trades=100, max_age_hours=1), clock=clock
        )
        old = ledger.record_trade(make_proposal())
        clock.advance(hours=2)
        fresh = ledger.record_trade(make_proposal())

        assert ledger.get_trade(old.id) is None
        assert ledger.all_trades() == [fresh]


class TestConcurrency:
    """Concurrent access tests."""

    def test_concurrent_records(self, ledger: TradeLedger, make_proposal):
        """Parallel writers lose no trades and share no ids."""
        per_thread = 50
        results: list[list] = []

        def worker() -> None:
            results.append([ledger.record_trade(make_proposal()) for _ in range(per_thread)])

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        recorded = [trade for batch in results for trade in batch]
        assert len(ledger) == len(recorded) == 8 * per_thread
        assert len({t.id for t in recorded}) == len(recorded)
        assert sorted(t.sequence for t in recorded) == list(range(1, len(recorded) + 1))

    def test_concurrent_resolution_settles_once(self, ledger: TradeLedger, make_proposal):
        """Racing resolvers agree on a single outcome."""
        trade = ledger.record_trade(make_proposal())
        changed: list[bool] = []
        lock = threading.Lock()

        def worker(outcome: TradeStatus) -> None:
            _, did_change = ledger.transition(trade.id, outcome)
            with lock:
                changed.append(did_change)

        threads = [
            threading.Thread(target=worker, args=(TradeStatus.WIN if i % 2 else TradeStatus.LOSS,))
            for i in range(10)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert changed.count(True) == 1
        assert ledger.get_trade(trade.id).is_resolved
