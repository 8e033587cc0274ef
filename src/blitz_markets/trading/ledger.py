"""Trade Ledger.

Sole owner and writer of trade state. Every recorded trade is a frozen
snapshot; resolution swaps in a new snapshot under the ledger lock, so
readers only ever see whole trades and callers can never mutate ledger
state through a value they hold.
"""

import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from blitz_markets.bots.registry import BotRegistry
from blitz_markets.common.config import SimulationConfig
from blitz_markets.common.errors import InvalidProposalError
from blitz_markets.common.logging import get_logger
from blitz_markets.common.time_utils import utc_now
from blitz_markets.trading.interfaces import Trade, TradeProposal, TradeStatus, settle_pnl

logger = get_logger(__name__)

DEFAULT_RECENT_LIMIT = 50


@dataclass(frozen=True)
class RetentionPolicy:
    """Bounds on how many trades the ledger keeps in memory."""

    max_trades: int = 500
    max_age_hours: float | None = None

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "RetentionPolicy":
        """Build from simulation config."""
        return cls(
            max_trades=config.retention_max_trades,
            max_age_hours=config.retention_max_age_hours,
        )


class TradeLedger:
    """In-memory, thread-safe store of simulated trades."""

    def __init__(
        self,
        registry: BotRegistry,
        retention: RetentionPolicy | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize ledger.

        Args:
            registry: Bots that may own trades.
            retention: Memory bound. Oldest trades are evicted first.
            clock: Source of creation/resolution timestamps.
        """
        self.registry = registry
        self.retention = retention or RetentionPolicy()
        self._clock = clock

        self._lock = threading.Lock()
        self._trades: list[Trade] = []  # Insertion order, oldest first
        self._index: dict[str, int] = {}  # trade id -> position in _trades
        self._sequence = 0
        self._version = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._trades)

    @property
    def version(self) -> int:
        """Mutation counter; changes on every record, resolve, eviction or clear."""
        with self._lock:
            return self._version

    def record_trade(self, proposal: TradeProposal, comment: str | None = None) -> Trade:
        """Record a new PENDING trade.

        Args:
            proposal: Validated trade proposal.
            comment: Optional commentary to attach.

        Returns:
            Snapshot of the recorded trade, visible to readers on return.

        Raises:
            InvalidProposalError: If the proposal names an unregistered bot.
        """
        if proposal.bot_id not in self.registry:
            raise InvalidProposalError(f"Unknown bot: {proposal.bot_id}")

        with self._lock:
            self._sequence += 1
            trade = Trade(
                id=str(uuid.uuid4()),
                sequence=self._sequence,
                bot_id=proposal.bot_id,
                market=proposal.market,
                action=proposal.action,
                stake=proposal.stake,
                odds=proposal.odds,
                trigger=proposal.trigger,
                created_at=self._clock(),
                comment=comment,
            )
            self._index[trade.id] = len(self._trades)
            self._trades.append(trade)
            self._version += 1
            evicted = self._apply_retention()

        logger.info(
            "trade_recorded",
            trade_id=trade.id,
            bot_id=trade.bot_id,
            market=trade.market,
            action=trade.action.value,
            stake=trade.stake,
            odds=trade.odds,
        )
        if evicted:
            logger.debug("trades_evicted", count=evicted)

        return trade

    def resolve_trade(self, trade_id: str, outcome: TradeStatus) -> Trade | None:
        """Move a PENDING trade to WIN or LOSS.

        Idempotent: a trade that is already resolved is returned unchanged.

        Args:
            trade_id: Trade to resolve.
            outcome: WIN or LOSS.

        Returns:
            Current snapshot of the trade, or None if the id is unknown.

        Raises:
            ValueError: If outcome is PENDING.
        """
        trade, _ = self.transition(trade_id, outcome)
        return trade

    def transition(self, trade_id: str, outcome: TradeStatus) -> tuple[Trade | None, bool]:
        """Resolve a trade and report whether this call changed it.

        Args:
            trade_id: Trade to resolve.
            outcome: WIN or LOSS.

        Returns:
            (current snapshot or None if unknown, True if this call moved it
            out of PENDING).

        Raises:
            ValueError: If outcome is PENDING.
        """
        if not outcome.is_resolved:
            raise ValueError("Trades can only be resolved to WIN or LOSS")

        with self._lock:
            position = self._index.get(trade_id)
            if position is None:
                return None, False

            trade = self._trades[position]
            if trade.is_resolved:
                return trade, False

            trade = replace(
                trade,
                status=outcome,
                realized_pnl=settle_pnl(trade.stake, trade.odds, outcome),
                resolved_at=self._clock(),
            )
            self._trades[position] = trade
            self._version += 1

        logger.info(
            "trade_resolved",
            trade_id=trade.id,
            bot_id=trade.bot_id,
            outcome=outcome.value,
            realized_pnl=trade.realized_pnl,
        )
        return trade, True

    def get_trade(self, trade_id: str) -> Trade | None:
        """Get a trade snapshot by id."""
        with self._lock:
            position = self._index.get(trade_id)
            return self._trades[position] if position is not None else None

    def all_trades(self) -> list[Trade]:
        """All retained trades, oldest first."""
        with self._lock:
            return list(self._trades)

    def trades_for_bot(self, bot_id: str) -> list[Trade]:
        """A bot's retained trades in recording order, oldest first."""
        with self._lock:
            return [t for t in self._trades if t.bot_id == bot_id]

    def recent_trades(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[Trade]:
        """Most recent trades, newest first."""
        if limit <= 0:
            return []
        with self._lock:
            return self._trades[-limit:][::-1]

    def pending_trades(self, limit: int | None = None) -> list[Trade]:
        """PENDING trades, oldest first, optionally capped."""
        with self._lock:
            pending = [t for t in self._trades if not t.is_resolved]
        return pending if limit is None else pending[:limit]

    def clear(self) -> None:
        """Drop every trade."""
        with self._lock:
            self._trades.clear()
            self._index.clear()
            self._version += 1

    def _apply_retention(self) -> int:
        """Evict trades beyond the retention bounds. Caller holds the lock."""
        keep_from = max(0, len(self._trades) - self.retention.max_trades)

        if self.retention.max_age_hours is not None:
            cutoff = self._clock() - timedelta(hours=self.retention.max_age_hours)
            while keep_from < len(self._trades) and self._trades[keep_from].created_at < cutoff:
                keep_from += 1

        if keep_from == 0:
            return 0

        del self._trades[:keep_from]
        self._index = {t.id: i for i, t in enumerate(self._trades)}
        self._version += 1
        return keep_from
