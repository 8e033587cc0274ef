"""Event taxonomy: classify play-by-play text and rank event kinds.

Classification applies ordered substring heuristics; the first rule that
matches wins and unmatched text falls through to ``EventKind.PLAY``.
"""

import re
from enum import Enum


class EventKind(str, Enum):
    """Closed set of game event kinds."""

    TOUCHDOWN = "TOUCHDOWN"
    FIELD_GOAL = "FIELD_GOAL"
    INTERCEPTION = "INTERCEPTION"
    FUMBLE = "FUMBLE"
    SAFETY = "SAFETY"
    SACK = "SACK"
    BIG_PLAY = "BIG_PLAY"
    PUNT = "PUNT"
    KICKOFF = "KICKOFF"
    TWO_POINT_CONVERSION = "TWO_POINT_CONVERSION"
    HALFTIME = "HALFTIME"
    GAME_START = "GAME_START"
    GAME_END = "GAME_END"
    PLAY = "PLAY"

    @classmethod
    def from_value(cls, value: "str | EventKind") -> "EventKind":
        """Parse a kind name, falling back to PLAY for unknown values."""
        if isinstance(value, EventKind):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.PLAY


EVENT_PRIORITY: dict[EventKind, int] = {
    EventKind.TOUCHDOWN: 10,
    EventKind.SAFETY: 9,
    EventKind.INTERCEPTION: 8,
    EventKind.FUMBLE: 8,
    EventKind.FIELD_GOAL: 7,
    EventKind.TWO_POINT_CONVERSION: 7,
    EventKind.BIG_PLAY: 6,
    EventKind.SACK: 5,
    EventKind.HALFTIME: 4,
    EventKind.GAME_START: 4,
    EventKind.GAME_END: 4,
    EventKind.PUNT: 2,
    EventKind.KICKOFF: 2,
    EventKind.PLAY: 1,
}

SIGNIFICANT_EVENTS: frozenset[EventKind] = frozenset(
    {
        EventKind.TOUCHDOWN,
        EventKind.FIELD_GOAL,
        EventKind.INTERCEPTION,
        EventKind.FUMBLE,
        EventKind.SAFETY,
        EventKind.BIG_PLAY,
        EventKind.TWO_POINT_CONVERSION,
        EventKind.HALFTIME,
        EventKind.GAME_START,
        EventKind.GAME_END,
    }
)

SCORING_EVENTS: frozenset[EventKind] = frozenset(
    {
        EventKind.TOUCHDOWN,
        EventKind.FIELD_GOAL,
        EventKind.SAFETY,
        EventKind.TWO_POINT_CONVERSION,
    }
)

TURNOVER_EVENTS: frozenset[EventKind] = frozenset(
    {EventKind.INTERCEPTION, EventKind.FUMBLE}
)

EVENT_LABELS: dict[EventKind, str] = {
    EventKind.TOUCHDOWN: "🏈 TOUCHDOWN",
    EventKind.FIELD_GOAL: "🎯 FIELD GOAL",
    EventKind.INTERCEPTION: "🔄 INTERCEPTION",
    EventKind.FUMBLE: "💥 FUMBLE",
    EventKind.SAFETY: "⚠️ SAFETY",
    EventKind.SACK: "💪 SACK",
    EventKind.BIG_PLAY: "🔥 BIG PLAY",
    EventKind.PUNT: "👟 PUNT",
    EventKind.KICKOFF: "🦵 KICKOFF",
    EventKind.TWO_POINT_CONVERSION: "✌️ 2-PT CONVERSION",
    EventKind.HALFTIME: "⏰ HALFTIME",
    EventKind.GAME_START: "🏟️ GAME START",
    EventKind.GAME_END: "🏆 GAME END",
    EventKind.PLAY: "📋 PLAY",
}

# Yardage at or above which an otherwise unclassified play is a big play
BIG_PLAY_YARDS = 20

_YARDAGE_RE = re.compile(r"(\d+)\s*yard", re.IGNORECASE)

# Ordered rules; first match wins
_KEYWORD_RULES: list[tuple[EventKind, tuple[str, ...]]] = [
    (EventKind.TOUCHDOWN, ("touchdown", " td ", "td!")),
    (EventKind.FIELD_GOAL, ("field goal", "fg good", "fg is good")),
    (EventKind.INTERCEPTION, ("interception", "intercepted", " int ")),
    (EventKind.FUMBLE, ("fumble",)),
    (EventKind.SAFETY, ("safety",)),
    (EventKind.SACK, ("sack",)),
    (EventKind.TWO_POINT_CONVERSION, ("two-point", "two point", "2-point")),
    (EventKind.HALFTIME, ("halftime", "half time")),
    (EventKind.PUNT, ("punt",)),
    (EventKind.KICKOFF, ("kickoff", "kick off")),
]


def classify(raw_text: str) -> EventKind:
    """Classify play-by-play text into an event kind.

    Args:
        raw_text: Free-form play description.

    Returns:
        The first matching kind, or PLAY if nothing matches.
    """
    text = raw_text.lower()

    for kind, needles in _KEYWORD_RULES:
        if any(needle in text for needle in needles):
            return kind

    match = _YARDAGE_RE.search(text)
    if match and int(match.group(1)) >= BIG_PLAY_YARDS:
        return EventKind.BIG_PLAY

    return EventKind.PLAY


def is_significant(kind: EventKind) -> bool:
    """Check if an event kind is eligible to trigger trades."""
    return kind in SIGNIFICANT_EVENTS


def priority(kind: EventKind) -> int:
    """Get the fixed priority (10 highest, 1 lowest) of an event kind."""
    return EVENT_PRIORITY[kind]


def is_scoring(kind: EventKind) -> bool:
    """Check if an event kind puts points on the board."""
    return kind in SCORING_EVENTS


def is_turnover(kind: EventKind) -> bool:
    """Check if an event kind changes possession by mistake."""
    return kind in TURNOVER_EVENTS


def event_label(kind: EventKind) -> str:
    """Get human-readable event label."""
    return EVENT_LABELS.get(kind, kind.value)
