"""Brand bots: registry, reaction policy and commentary."""

from blitz_markets.bots.commentary import CommentaryGenerator
from blitz_markets.bots.policy import ReactionPolicy, naive_action
from blitz_markets.bots.registry import (
    DEFAULT_BOTS,
    Bot,
    BotRegistry,
    Personality,
    default_registry,
)

__all__ = [
    "Bot",
    "BotRegistry",
    "DEFAULT_BOTS",
    "Personality",
    "default_registry",
    "ReactionPolicy",
    "naive_action",
    "CommentaryGenerator",
]
