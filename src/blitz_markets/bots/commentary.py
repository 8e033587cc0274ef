"""Personality-flavored trade commentary."""

import random
from typing import Any

from blitz_markets.bots.registry import Bot, Personality
from blitz_markets.common.logging import get_logger
from blitz_markets.events.interfaces import GameEvent
from blitz_markets.events.taxonomy import EventKind
from blitz_markets.trading.interfaces import Trade, TradeAction, TradeProposal

logger = get_logger(__name__)

TemplateKey = tuple[Personality, EventKind | None, TradeAction | None]

TEMPLATES: dict[TemplateKey, tuple[str, ...]] = {
    # Aggressive
    (Personality.AGGRESSIVE, None, None): (
        "🚀 ALL IN on {market}! Let's go!",
        "Big money move. {market} is the play.",
        "Fortune favors the bold. {action} {market}!",
        "No guts, no glory. Loading up on {market}",
        "This is the moment. {action}!",
    ),
    (Personality.AGGRESSIVE, EventKind.TOUCHDOWN, TradeAction.BUY): (
        "🔥 {team} just found the end zone. ${stake} on {market}, no hesitation!",
        "Touchdown means reload. {market} at {odds}x, all day.",
    ),
    (Personality.AGGRESSIVE, EventKind.INTERCEPTION, TradeAction.SELL): (
        "Picked off! Dumping {market} before everyone else wakes up.",
    ),
    (Personality.AGGRESSIVE, EventKind.FUMBLE, TradeAction.SELL): (
        "Ball's on the turf and I'm out of {market}. ${stake} says it gets worse.",
    ),
    # Conservative
    (Personality.CONSERVATIVE, None, None): (
        "Calculated risk on {market}. The math checks out.",
        "Small position, high conviction. {market} looking solid.",
        "Playing it smart with {market}.",
        "Patience pays. {action} at these levels.",
        "Steady hands, steady gains.",
    ),
    (Personality.CONSERVATIVE, EventKind.TOUCHDOWN, None): (
        "Waited for the touchdown. Now a measured {action} on {market} at {odds}x.",
    ),
    (Personality.CONSERVATIVE, EventKind.GAME_END, None): (
        "Final whistle, final slice. Closing out with {market}.",
    ),
    # Contrarian
    (Personality.CONTRARIAN, None, None): (
        "Everyone's zigging, I'm zagging. {action} {market}",
        "The crowd is wrong. Fading the public.",
        "Unpopular opinion: {market} is the move.",
        "When they're greedy, I'm fearful. {action}.",
        "Against the grain. That's how we win.",
    ),
    (Personality.CONTRARIAN, None, TradeAction.SELL): (
        "Stadium's loud, I'm selling {market}. Hype is priced in.",
    ),
    (Personality.CONTRARIAN, EventKind.INTERCEPTION, None): (
        "Everyone's panicking about the pick. Perfect time to {action_lower} {market}.",
    ),
    (Personality.CONTRARIAN, EventKind.FUMBLE, None): (
        "Fumbles are noise. {action} {market} while the crowd overreacts.",
    ),
    # Momentum
    (Personality.MOMENTUM, None, None): (
        "Riding the wave! {market} has momentum.",
        "The trend is your friend. {action}!",
        "Following the action. {market} is heating up!",
        "Can't fight the tape. {action} {market}",
        "Energy is shifting. Time to {action_lower}!",
    ),
    (Personality.MOMENTUM, EventKind.BIG_PLAY, None): (
        "{team} just ripped off a big one. Chasing {market} at {odds}x!",
    ),
}

GENERIC_TEMPLATES: tuple[str, ...] = (
    "{brand} is on the board: {action} {market} at {odds}x.",
)


def _lookup_order(
    personality: Personality, kind: EventKind | None, action: TradeAction
) -> list[TemplateKey]:
    keys: list[TemplateKey] = []
    if kind is not None:
        keys.append((personality, kind, action))
        keys.append((personality, kind, None))
    keys.append((personality, None, action))
    keys.append((personality, None, None))
    return keys


class CommentaryGenerator:
    """Renders short trade commentary in a bot's voice."""

    def __init__(self, rng: random.Random | None = None):
        """Initialize generator.

        Args:
            rng: Random source for picking among template variants.
        """
        self._rng = rng or random.Random()

    def select_templates(
        self, personality: Personality, kind: EventKind | None, action: TradeAction
    ) -> tuple[str, ...]:
        """Most specific template pool for the combination."""
        for key in _lookup_order(personality, kind, action):
            if templates := TEMPLATES.get(key):
                return templates
        return GENERIC_TEMPLATES

    def generate_comment(
        self,
        bot: Bot,
        trade: Trade | TradeProposal,
        event: GameEvent | None = None,
    ) -> str:
        """Generate a personality-driven comment for a trade.

        Args:
            bot: Bot that placed the trade.
            trade: The trade (or proposal about to be recorded).
            event: Triggering event, if available.

        Returns:
            Rendered comment. Falls back to a generic line if a template
            cannot be rendered.
        """
        kind = event.kind if event else trade.trigger.kind
        templates = self.select_templates(bot.personality, kind, trade.action)
        template = self._rng.choice(templates)
        values = self._values(bot, trade, event)

        try:
            return template.format(**values)
        except (KeyError, IndexError, ValueError):
            logger.warning("comment_template_failed", template=template, bot_id=bot.id)
            return GENERIC_TEMPLATES[0].format(**values)

    @staticmethod
    def _values(
        bot: Bot, trade: Trade | TradeProposal, event: GameEvent | None
    ) -> dict[str, Any]:
        team = event.team_name if event and event.team_name else "the field"
        return {
            "market": trade.market,
            "action": trade.action.value,
            "action_lower": trade.action.value.lower(),
            "odds": f"{trade.odds:.2f}",
            "stake": f"{trade.stake:,.0f}",
            "team": team,
            "brand": bot.brand,
        }
