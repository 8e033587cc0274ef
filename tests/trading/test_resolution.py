"""Tests for the resolution engine."""

import pytest

from blitz_markets.common.config import SimulationConfig
from blitz_markets.trading.interfaces import TradeStatus
from blitz_markets.trading.ledger import TradeLedger
from blitz_markets.trading.resolution import ResolutionEngine
from blitz_markets.trading.stats import StatsAggregator


class TestWinProbability:
    """Tests for implied win probability."""

    @pytest.fixture
    def engine(self, ledger: TradeLedger) -> ResolutionEngine:
        """Engine with default clamps."""
        return ResolutionEngine(ledger, SimulationConfig())

    def test_implied_from_odds(self, engine, ledger, make_proposal):
        """p_win is the reciprocal of the odds."""
        trade = ledger.record_trade(make_proposal(odds=2.5))
        assert engine.win_probability(trade) == pytest.approx(0.4)

    def test_clamped(self, engine, ledger, make_proposal):
        """Extreme odds are clamped into the configured range."""
        long_shot = ledger.record_trade(make_proposal(odds=50.0))
        favorite = ledger.record_trade(make_proposal(odds=1.01))

        assert engine.win_probability(long_shot) == 0.05
        assert engine.win_probability(favorite) == 0.95

    def test_draw_outcome(self, ledger, scripted_random, make_proposal):
        """Draw below p_win wins, at or above loses."""
        trade = ledger.record_trade(make_proposal(odds=2.0))

        assert ResolutionEngine(ledger, rng=scripted_random([0.49])).draw_outcome(trade) == TradeStatus.WIN
        assert ResolutionEngine(ledger, rng=scripted_random([0.5])).draw_outcome(trade) == TradeStatus.LOSS


class TestResolvePendingTrades:
    """Tests for ResolutionEngine.resolve_pending_trades."""

    def test_batch_is_bounded_and_oldest_first(self, ledger, scripted_random, make_proposal):
        """Only the oldest batch_size trades are resolved."""
        trades = [ledger.record_trade(make_proposal()) for _ in range(8)]
        engine = ResolutionEngine(ledger, SimulationConfig(resolution_batch_size=5), scripted_random([0.1]))

        resolved = engine.resolve_pending_trades()

        assert [t.id for t in resolved] == [t.id for t in trades[:5]]
        assert [t.id for t in ledger.pending_trades()] == [t.id for t in trades[5:]]

    def test_explicit_batch_size(self, ledger, scripted_random, make_proposal):
        """Argument overrides the configured batch size."""
        for _ in range(4):
            ledger.record_trade(make_proposal())
        engine = ResolutionEngine(ledger, rng=scripted_random([0.1]))

        assert len(engine.resolve_pending_trades(batch_size=2)) == 2
        assert engine.resolve_pending_trades(batch_size=0) == []
        assert len(ledger.pending_trades()) == 2

    def test_never_reresolves(self, ledger, scripted_random, make_proposal):
        """Already-resolved trades are skipped on later passes."""
        trade = ledger.record_trade(make_proposal())
        engine = ResolutionEngine(ledger, rng=scripted_random([0.1]))

        first = engine.resolve_pending_trades()
        second = engine.resolve_pending_trades()

        assert [t.id for t in first] == [trade.id]
        assert second == []
        assert ledger.get_trade(trade.id).status == TradeStatus.WIN

    def test_empty_ledger(self, ledger):
        """Nothing pending, nothing resolved."""
        assert ResolutionEngine(ledger).resolve_pending_trades() == []

    def test_pnl_conservation(self, ledger, registry, clock, make_proposal):
        """Total P&L equals the sum of settled trade P&L."""
        engine = ResolutionEngine(ledger, SimulationConfig(seed=99))
        for i in range(30):
            bot_id = registry.ids[i % len(registry)]
            ledger.record_trade(make_proposal(bot_id=bot_id, stake=50.0 + i, odds=1.5 + i / 10))
        while engine.resolve_pending_trades():
            pass

        aggregator = StatsAggregator(registry, ledger, clock=clock)
        expected = round(sum(t.realized_pnl for t in ledger.all_trades()), 2)
        total = round(sum(s.stats.total_pnl for s in aggregator.leaderboard()), 2)

        assert not ledger.pending_trades()
        assert total == pytest.approx(expected)

    def test_scripted_sequence_stats(self, ledger, registry, clock, scripted_random, make_proposal):
        """WWWLLWWLWW at even odds nets +400, 70% and a 2-win streak."""
        pattern = "WWWLLWWLWW"
        for _ in pattern:
            ledger.record_trade(make_proposal(bot_id="pizzashack", stake=100.0, odds=2.0))
        draws = [0.1 if c == "W" else 0.9 for c in pattern]
        engine = ResolutionEngine(ledger, rng=scripted_random(draws))

        resolved = engine.resolve_pending_trades(batch_size=10)
        stats = StatsAggregator(registry, ledger, clock=clock).stats_for_bot("pizzashack")

        assert "".join(t.status.value[0] for t in resolved) == pattern
        assert stats.total_pnl == 400.0
        assert stats.win_rate == 70
        assert stats.streak == 2
        assert stats.wins == 7
        assert stats.losses == 3
        assert stats.pending == 0
