"""Trading interfaces and data types."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from blitz_markets.common.errors import InvalidProposalError
from blitz_markets.events.taxonomy import EventKind, event_label


class TradeAction(str, Enum):
    """Side of a simulated trade."""

    BUY = "BUY"
    SELL = "SELL"

    @property
    def inverse(self) -> "TradeAction":
        """The opposite side."""
        return TradeAction.SELL if self is TradeAction.BUY else TradeAction.BUY


class TradeStatus(str, Enum):
    """Trade lifecycle status. PENDING transitions once to WIN or LOSS."""

    PENDING = "PENDING"
    WIN = "WIN"
    LOSS = "LOSS"

    @property
    def is_resolved(self) -> bool:
        """Check if this is a terminal status."""
        return self is not TradeStatus.PENDING


@dataclass(frozen=True)
class EventTrigger:
    """Reference to the game event that caused a trade."""

    event_id: str
    kind: EventKind
    label: str

    @classmethod
    def for_event(cls, event_id: str, kind: EventKind) -> "EventTrigger":
        """Build a trigger with the kind's display label."""
        return cls(event_id=event_id, kind=kind, label=event_label(kind))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"event_id": self.event_id, "kind": self.kind.value, "label": self.label}


@dataclass(frozen=True)
class TradeProposal:
    """A trade a bot wants to place, prior to being recorded.

    Validated on construction; an invalid proposal is a logic error and
    never reaches the ledger.
    """

    bot_id: str
    market: str
    action: TradeAction
    stake: float
    odds: float
    trigger: EventTrigger

    def __post_init__(self) -> None:
        if not math.isfinite(self.stake) or self.stake <= 0:
            raise InvalidProposalError(f"stake must be positive, got {self.stake}")
        if not math.isfinite(self.odds) or self.odds <= 1.0:
            raise InvalidProposalError(f"odds must exceed 1.0, got {self.odds}")
        if not self.market:
            raise InvalidProposalError("market label must not be empty")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "bot_id": self.bot_id,
            "market": self.market,
            "action": self.action.value,
            "stake": self.stake,
            "odds": self.odds,
            "trigger": self.trigger.to_dict(),
        }


@dataclass(frozen=True)
class Trade:
    """Immutable snapshot of a recorded trade.

    The ledger replaces the snapshot on resolution; holders of an older
    snapshot never see it change.
    """

    id: str
    sequence: int  # Ledger insertion order
    bot_id: str
    market: str
    action: TradeAction
    stake: float
    odds: float
    trigger: EventTrigger
    created_at: datetime
    status: TradeStatus = TradeStatus.PENDING
    realized_pnl: float | None = None
    resolved_at: datetime | None = None
    comment: str | None = None

    @property
    def is_resolved(self) -> bool:
        """Check if the trade reached a terminal status."""
        return self.status.is_resolved

    @property
    def potential_payout(self) -> float:
        """Profit if the trade wins."""
        return round(self.stake * (self.odds - 1), 2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "sequence": self.sequence,
            "bot_id": self.bot_id,
            "market": self.market,
            "action": self.action.value,
            "stake": self.stake,
            "odds": self.odds,
            "event_trigger": self.trigger.to_dict(),
            "created_at": self.created_at.isoformat(),
            "status": self.status.value,
            "realized_pnl": self.realized_pnl,
            "resolved_at": self.resolved_at.isoformat() if self.resolved_at else None,
            "comment": self.comment,
        }


def settle_pnl(stake: float, odds: float, outcome: TradeStatus) -> float:
    """Realized P&L for a resolved trade.

    Args:
        stake: Amount staked.
        odds: Decimal entry odds.
        outcome: WIN or LOSS.

    Returns:
        ``stake * (odds - 1)`` on a win, ``-stake`` on a loss, in cents.

    Raises:
        ValueError: If outcome is PENDING.
    """
    if outcome is TradeStatus.WIN:
        return round(stake * (odds - 1), 2)
    if outcome is TradeStatus.LOSS:
        return round(-stake, 2)
    raise ValueError(f"Cannot settle a trade with outcome {outcome}")
