"""Stats & Leaderboard Aggregator.

Bot statistics are never stored; they are recomputed from the ledger on
every call, so standings are always a pure function of the current trade
set.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from blitz_markets.bots.registry import Bot, BotRegistry
from blitz_markets.common.time_utils import start_of_day, utc_now
from blitz_markets.trading.interfaces import Trade, TradeStatus
from blitz_markets.trading.ledger import TradeLedger


@dataclass(frozen=True)
class BotStats:
    """Derived performance figures for one bot."""

    total_trades: int = 0
    wins: int = 0
    losses: int = 0
    pending: int = 0
    win_rate: int = 0  # Whole percent of resolved trades
    total_pnl: float = 0.0
    today_pnl: float = 0.0
    streak: int = 0  # Positive = winning run, negative = losing run

    @property
    def resolved(self) -> int:
        """Number of resolved trades."""
        return self.wins + self.losses

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_trades": self.total_trades,
            "wins": self.wins,
            "losses": self.losses,
            "pending": self.pending,
            "win_rate": self.win_rate,
            "total_pnl": self.total_pnl,
            "today_pnl": self.today_pnl,
            "streak": self.streak,
        }


@dataclass(frozen=True)
class BotStanding:
    """A bot paired with its stats, as shown on the leaderboard."""

    bot: Bot
    stats: BotStats
    rank: int | None = None  # 1-based; None outside a ranked listing

    def to_dict(self) -> dict[str, Any]:
        """Flatten bot profile and stats into one dictionary."""
        data = {**self.bot.to_dict(), **self.stats.to_dict()}
        if self.rank is not None:
            data["rank"] = self.rank
        return data


def compute_streak(trades: Iterable[Trade]) -> int:
    """Signed length of the latest run of same-outcome resolved trades.

    Args:
        trades: One bot's trades in recording order.

    Returns:
        Positive for a winning run, negative for a losing run, 0 if the most
        recently recorded trade is still pending or nothing is resolved.
    """
    trades = list(trades)
    if not trades or not trades[-1].is_resolved:
        return 0

    resolved = sorted(
        (t for t in trades if t.is_resolved),
        key=lambda t: (t.resolved_at, t.sequence),
    )

    last = resolved[-1].status
    run = 0
    for trade in reversed(resolved):
        if trade.status is not last:
            break
        run += 1
    return run if last is TradeStatus.WIN else -run


def compute_bot_stats(trades: Iterable[Trade], now: datetime | None = None) -> BotStats:
    """Compute stats for one bot's trades.

    Args:
        trades: One bot's trades in recording order.
        now: Reference time for today's P&L. Defaults to current UTC time.

    Returns:
        Derived stats.
    """
    trades = list(trades)
    today = start_of_day(now or utc_now())

    wins = sum(1 for t in trades if t.status is TradeStatus.WIN)
    losses = sum(1 for t in trades if t.status is TradeStatus.LOSS)
    resolved = wins + losses

    total_pnl = sum(t.realized_pnl for t in trades if t.realized_pnl is not None)
    today_pnl = sum(
        t.realized_pnl
        for t in trades
        if t.realized_pnl is not None and t.created_at >= today
    )

    return BotStats(
        total_trades=len(trades),
        wins=wins,
        losses=losses,
        pending=len(trades) - resolved,
        win_rate=round(100 * wins / resolved) if resolved else 0,
        total_pnl=round(total_pnl, 2),
        today_pnl=round(today_pnl, 2),
        streak=compute_streak(trades),
    )


class StatsAggregator:
    """Computes per-bot stats and the leaderboard from the ledger."""

    def __init__(
        self,
        registry: BotRegistry,
        ledger: TradeLedger,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize aggregator.

        Args:
            registry: Bots to report on.
            ledger: Source of trades.
            clock: Reference time for today's P&L.
        """
        self.registry = registry
        self.ledger = ledger
        self._clock = clock

    def stats_for_bot(self, bot_id: str) -> BotStats | None:
        """Stats for one bot (None if the bot is not registered)."""
        if bot_id not in self.registry:
            return None
        return compute_bot_stats(self.ledger.trades_for_bot(bot_id), now=self._clock())

    def bots_with_stats(self) -> list[BotStanding]:
        """Every bot with its stats, in registry order."""
        by_bot = self._trades_by_bot()
        now = self._clock()
        return [
            BotStanding(bot=bot, stats=compute_bot_stats(by_bot.get(bot.id, []), now=now))
            for bot in self.registry
        ]

    def leaderboard(self) -> list[BotStanding]:
        """Every bot ranked by total P&L, then win rate, then id."""
        ranked = sorted(
            self.bots_with_stats(),
            key=lambda s: (-s.stats.total_pnl, -s.stats.win_rate, s.bot.id),
        )
        return [
            BotStanding(bot=s.bot, stats=s.stats, rank=i)
            for i, s in enumerate(ranked, start=1)
        ]

    def _trades_by_bot(self) -> dict[str, list[Trade]]:
        # One snapshot for all bots so the table is internally consistent
        by_bot: dict[str, list[Trade]] = {}
        for trade in self.ledger.all_trades():
            by_bot.setdefault(trade.bot_id, []).append(trade)
        return by_bot
