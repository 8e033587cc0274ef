"""Game event interfaces and data types."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from blitz_markets.common.time_utils import parse_iso, utc_now
from blitz_markets.events.taxonomy import EventKind, classify


@dataclass(frozen=True)
class GameEvent:
    """A single classified occurrence in the game feed.

    Produced by an external detector or the demo feed; the engine never
    mutates it.
    """

    id: str
    kind: EventKind
    description: str = ""
    team: str | None = None  # Abbreviation, e.g. "KC"
    team_full: str | None = None
    player: str | None = None
    quarter: int = 1
    clock: str = "15:00"
    home_score: int = 0
    away_score: int = 0
    timestamp: datetime = field(default_factory=utc_now)
    confidence: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    @property
    def team_name(self) -> str | None:
        """Best available team attribution (full name preferred)."""
        return self.team_full or self.team

    @classmethod
    def from_play_text(cls, text: str, **kwargs: Any) -> "GameEvent":
        """Build an event by classifying raw play-by-play text.

        Args:
            text: Play description.
            **kwargs: Remaining GameEvent fields. ``id`` defaults to a new UUID.

        Returns:
            Classified event.
        """
        event_id = kwargs.pop("id", None) or str(uuid.uuid4())
        return cls(id=event_id, kind=classify(text), description=text, **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameEvent":
        """Parse an event dict from the external feed.

        Accepts snake_case keys or the feed's camelCase keys (``homeScore``,
        ``teamFull``), and ``kind`` or ``type`` for the event kind. When no
        kind is given the description is classified.
        """
        raw_kind = data.get("kind") or data.get("type")
        description = data.get("description", "")
        kind = EventKind.from_value(raw_kind) if raw_kind else classify(description)

        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = parse_iso(timestamp)
        elif timestamp is None:
            timestamp = utc_now()

        return cls(
            id=str(data.get("id") or uuid.uuid4()),
            kind=kind,
            description=description,
            team=data.get("team"),
            team_full=data.get("team_full", data.get("teamFull")),
            player=data.get("player"),
            quarter=int(data.get("quarter", 1)),
            clock=str(data.get("clock", "15:00")),
            home_score=int(data.get("home_score", data.get("homeScore", 0))),
            away_score=int(data.get("away_score", data.get("awayScore", 0))),
            timestamp=timestamp,
            confidence=float(data.get("confidence", 1.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "description": self.description,
            "team": self.team,
            "team_full": self.team_full,
            "player": self.player,
            "quarter": self.quarter,
            "clock": self.clock,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "timestamp": self.timestamp.isoformat(),
            "confidence": self.confidence,
        }


class GameStatus(str, Enum):
    """Coarse game status."""

    PRE = "pre"
    IN = "in"
    POST = "post"


@dataclass(frozen=True)
class TeamScore:
    """Team identity and current score."""

    name: str
    abbreviation: str
    score: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"name": self.name, "abbreviation": self.abbreviation, "score": self.score}


@dataclass(frozen=True)
class GameState:
    """Snapshot of a game for display alongside the bot feed."""

    game_id: str
    status: GameStatus
    quarter: int
    clock: str
    home_team: TeamScore
    away_team: TeamScore
    venue: str | None = None
    last_event: GameEvent | None = None

    @property
    def score_diff(self) -> int:
        """Home team lead (negative = away leads)."""
        return self.home_team.score - self.away_team.score

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "game_id": self.game_id,
            "status": self.status.value,
            "quarter": self.quarter,
            "clock": self.clock,
            "home_team": self.home_team.to_dict(),
            "away_team": self.away_team.to_dict(),
            "venue": self.venue,
            "last_event": self.last_event.to_dict() if self.last_event else None,
        }
