"""Trading module: trade records, ledger, resolution and standings."""

from blitz_markets.trading.interfaces import (
    EventTrigger,
    Trade,
    TradeAction,
    TradeProposal,
    TradeStatus,
    settle_pnl,
)
from blitz_markets.trading.ledger import RetentionPolicy, TradeLedger
from blitz_markets.trading.resolution import ResolutionEngine
from blitz_markets.trading.stats import (
    BotStanding,
    BotStats,
    StatsAggregator,
    compute_bot_stats,
    compute_streak,
)

__all__ = [
    # Interfaces
    "EventTrigger",
    "Trade",
    "TradeAction",
    "TradeProposal",
    "TradeStatus",
    "settle_pnl",
    # Ledger
    "RetentionPolicy",
    "TradeLedger",
    # Resolution
    "ResolutionEngine",
    # Stats
    "BotStanding",
    "BotStats",
    "StatsAggregator",
    "compute_bot_stats",
    "compute_streak",
]
