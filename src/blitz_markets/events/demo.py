"""Scripted demo game feed.

Replays a fixed championship-game sequence (Chiefs at Eagles) so the bots
have something to react to before a real game is live. Events advance every
``interval_seconds`` when read by wall clock, or one at a time via
``next_event``.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from blitz_markets.common.logging import get_logger
from blitz_markets.common.time_utils import utc_now
from blitz_markets.events.interfaces import GameEvent, GameState, GameStatus, TeamScore
from blitz_markets.events.taxonomy import EventKind

logger = get_logger(__name__)

DEMO_GAME_ID = "demo-superbowl-lix"
DEMO_VENUE = "Caesars Superdome, New Orleans"
HOME_TEAM = ("Philadelphia Eagles", "PHI")
AWAY_TEAM = ("Kansas City Chiefs", "KC")

_KC = {"team": "KC", "team_full": "Kansas City Chiefs"}
_PHI = {"team": "PHI", "team_full": "Philadelphia Eagles"}

DEMO_EVENTS: list[dict[str, Any]] = [
    {
        "kind": EventKind.GAME_START,
        "description": "Super Bowl LIX is underway! Chiefs vs Eagles at the Superdome.",
        "team": "NFL",
        "quarter": 1, "clock": "15:00", "home_score": 0, "away_score": 0,
        "confidence": 1.0,
    },
    {
        "kind": EventKind.FIELD_GOAL,
        "description": "FIELD GOAL - Eagles - Jake Elliott, good from 47 yards! Eagles strike first.",
        **_PHI, "player": "Jake Elliott",
        "quarter": 1, "clock": "10:32", "home_score": 3, "away_score": 0,
        "confidence": 0.98,
    },
    {
        "kind": EventKind.BIG_PLAY,
        "description": "BIG PLAY - 45 yard completion! Mahomes finds Kelce wide open at the 10 yard line!",
        **_KC, "player": "Travis Kelce",
        "quarter": 1, "clock": "6:14", "home_score": 3, "away_score": 0,
        "confidence": 0.95,
    },
    {
        "kind": EventKind.TOUCHDOWN,
        "description": "TOUCHDOWN - Chiefs! Mahomes to Kelce, 15 yard pass! What a throw under pressure!",
        **_KC, "player": "Travis Kelce",
        "quarter": 1, "clock": "5:51", "home_score": 3, "away_score": 7,
        "confidence": 0.99,
    },
    {
        "kind": EventKind.INTERCEPTION,
        "description": "INTERCEPTION! Hurts pass intercepted by Nick Bolton at the 35! Chiefs ball!",
        **_KC, "player": "Nick Bolton",
        "quarter": 2, "clock": "12:44", "home_score": 3, "away_score": 7,
        "confidence": 0.97,
    },
    {
        "kind": EventKind.FUMBLE,
        "description": "FUMBLE! Isiah Pacheco loses the ball! Recovered by Eagles at the 30!",
        **_PHI, "player": "Eagles Defense",
        "quarter": 2, "clock": "8:22", "home_score": 3, "away_score": 7,
        "confidence": 0.96,
    },
    {
        "kind": EventKind.TOUCHDOWN,
        "description": "TOUCHDOWN - Eagles! Jalen Hurts with the QB sneak from the 1! Eagles tie it up!",
        **_PHI, "player": "Jalen Hurts",
        "quarter": 2, "clock": "6:15", "home_score": 10, "away_score": 7,
        "confidence": 0.99,
    },
    {
        "kind": EventKind.HALFTIME,
        "description": "HALFTIME - Eagles lead 10-7. Halftime show starting now!",
        "quarter": 2, "clock": "0:00", "home_score": 10, "away_score": 7,
        "confidence": 1.0,
    },
    {
        "kind": EventKind.TOUCHDOWN,
        "description": "TOUCHDOWN - Chiefs! Rashee Rice with the 22 yard catch-and-run! Chiefs retake the lead!",
        **_KC, "player": "Rashee Rice",
        "quarter": 3, "clock": "9:33", "home_score": 10, "away_score": 14,
        "confidence": 0.99,
    },
    {
        "kind": EventKind.SACK,
        "description": "SACK! Chris Jones brings down Hurts for a loss of 8 yards! Huge play!",
        **_KC, "player": "Chris Jones",
        "quarter": 3, "clock": "4:11", "home_score": 10, "away_score": 14,
        "confidence": 0.94,
    },
    {
        "kind": EventKind.BIG_PLAY,
        "description": "BIG PLAY - A.J. Brown beats his man for a 38 yard gain! Eagles in Chiefs territory!",
        **_PHI, "player": "A.J. Brown",
        "quarter": 4, "clock": "11:22", "home_score": 10, "away_score": 14,
        "confidence": 0.95,
    },
    {
        "kind": EventKind.FIELD_GOAL,
        "description": "FIELD GOAL - Eagles - Elliott from 32 yards, good! Eagles within one point!",
        **_PHI, "player": "Jake Elliott",
        "quarter": 4, "clock": "8:55", "home_score": 13, "away_score": 14,
        "confidence": 0.98,
    },
    {
        "kind": EventKind.TOUCHDOWN,
        "description": (
            "TOUCHDOWN - Chiefs! Mahomes scrambles, finds Xavier Worthy in the corner "
            "of the end zone! Incredible throw!"
        ),
        **_KC, "player": "Xavier Worthy",
        "quarter": 4, "clock": "2:17", "home_score": 13, "away_score": 21,
        "confidence": 0.99,
    },
    {
        "kind": EventKind.GAME_END,
        "description": "FINAL - Kansas City Chiefs win Super Bowl LIX! Chiefs 21, Eagles 13. Three-peat complete!",
        "quarter": 4, "clock": "0:00", "home_score": 13, "away_score": 21,
        "confidence": 1.0,
    },
]


class DemoEventFeed:
    """Serves the scripted demo events.

    Usage:
        feed = DemoEventFeed()
        event = feed.next_event()
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        interval_seconds: int = 15,
    ):
        """Initialize feed.

        Args:
            clock: Source of the current time.
            interval_seconds: Seconds per event when reading by wall clock.
        """
        self._clock = clock
        self.interval_seconds = interval_seconds
        self._index = 0
        self._started_at: datetime | None = None

    def __len__(self) -> int:
        return len(DEMO_EVENTS)

    def _build(self, index: int, event_id: str | None = None) -> GameEvent:
        return GameEvent(
            id=event_id or f"demo-{index}",
            timestamp=self._clock(),
            **DEMO_EVENTS[index],
        )

    def current_event(self) -> GameEvent:
        """Get the event for the elapsed time since the first call."""
        now = self._clock()
        if self._started_at is None:
            self._started_at = now

        elapsed = (now - self._started_at).total_seconds()
        index = min(int(elapsed // self.interval_seconds), len(DEMO_EVENTS) - 1)
        return self._build(index)

    def next_event(self) -> GameEvent:
        """Advance the sequence and return the new event, wrapping at the end."""
        self._index = (self._index + 1) % len(DEMO_EVENTS)
        event_id = f"demo-{self._index}-{int(self._clock().timestamp() * 1000)}"
        return self._build(self._index, event_id)

    def reset(self) -> None:
        """Rewind the demo to the beginning."""
        self._index = 0
        self._started_at = None
        logger.info("demo_feed_reset")

    def all_events(self) -> list[GameEvent]:
        """Get every demo event, in game order."""
        return [self._build(i) for i in range(len(DEMO_EVENTS))]

    def game_state(self) -> GameState:
        """Get the game state as of the current (time-based) event."""
        event = self.current_event()
        return GameState(
            game_id=DEMO_GAME_ID,
            status=GameStatus.POST if event.kind == EventKind.GAME_END else GameStatus.IN,
            quarter=event.quarter,
            clock=event.clock,
            home_team=TeamScore(*HOME_TEAM, score=event.home_score),
            away_team=TeamScore(*AWAY_TEAM, score=event.away_score),
            venue=DEMO_VENUE,
            last_event=event,
        )
