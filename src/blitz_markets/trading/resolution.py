"""Resolution Engine.

Settles PENDING trades with a weighted coin flip. The entry odds stand in
for the market's implied probability (``p_win ~ 1/odds``), clamped so no
trade is a sure thing either way. Idempotence lives in the ledger; this
engine only decides outcomes.
"""

import random
from typing import Protocol

from blitz_markets.common.config import SimulationConfig
from blitz_markets.common.logging import get_logger
from blitz_markets.trading.interfaces import Trade, TradeStatus
from blitz_markets.trading.ledger import TradeLedger

logger = get_logger(__name__)


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1)."""

    def random(self) -> float: ...


class ResolutionEngine:
    """Resolves outstanding trades in bounded batches."""

    def __init__(
        self,
        ledger: TradeLedger,
        config: SimulationConfig | None = None,
        rng: RandomSource | None = None,
    ):
        """Initialize engine.

        Args:
            ledger: Ledger holding the trades.
            config: Batch size and win-probability clamps.
            rng: Random source for outcome draws. Seed it (or script it) for
                reproducible outcomes.
        """
        self.ledger = ledger
        self.config = config or SimulationConfig()
        self._rng: RandomSource = rng or random.Random(self.config.seed)

    def win_probability(self, trade: Trade) -> float:
        """Implied win probability from entry odds, clamped."""
        p_win = 1.0 / trade.odds
        return max(
            self.config.min_win_probability,
            min(self.config.max_win_probability, p_win),
        )

    def draw_outcome(self, trade: Trade) -> TradeStatus:
        """Draw WIN or LOSS for a trade."""
        if self._rng.random() < self.win_probability(trade):
            return TradeStatus.WIN
        return TradeStatus.LOSS

    def resolve_pending_trades(self, batch_size: int | None = None) -> list[Trade]:
        """Resolve the oldest PENDING trades.

        Args:
            batch_size: Max trades to resolve. Defaults to the configured size.

        Returns:
            Snapshots of the trades this call resolved, oldest first.
        """
        limit = batch_size if batch_size is not None else self.config.resolution_batch_size
        if limit <= 0:
            return []

        resolved: list[Trade] = []
        for trade in self.ledger.pending_trades(limit=limit):
            result, changed = self.ledger.transition(trade.id, self.draw_outcome(trade))
            # Another caller may have settled or evicted it since the snapshot
            if changed and result is not None:
                resolved.append(result)

        if resolved:
            wins = sum(1 for t in resolved if t.status is TradeStatus.WIN)
            logger.info(
                "trades_resolved",
                count=len(resolved),
                wins=wins,
                losses=len(resolved) - wins,
            )
        return resolved
