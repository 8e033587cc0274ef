"""Game events: taxonomy, value types and the demo feed."""

from blitz_markets.events.demo import DEMO_EVENTS, DemoEventFeed
from blitz_markets.events.interfaces import GameEvent, GameState, GameStatus, TeamScore
from blitz_markets.events.taxonomy import (
    EventKind,
    classify,
    event_label,
    is_scoring,
    is_significant,
    is_turnover,
    priority,
)

__all__ = [
    # Taxonomy
    "EventKind",
    "classify",
    "event_label",
    "is_scoring",
    "is_significant",
    "is_turnover",
    "priority",
    # Value types
    "GameEvent",
    "GameState",
    "GameStatus",
    "TeamScore",
    # Demo
    "DEMO_EVENTS",
    "DemoEventFeed",
]
