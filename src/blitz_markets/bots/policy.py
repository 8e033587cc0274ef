"""Reaction Policy Module.

Decides, for each (bot, event) pair, whether the bot trades and on what
terms. Each personality has its own decision function:

- AGGRESSIVE: reacts to every significant event with oversized stakes
- CONSERVATIVE: reacts only to the biggest moments, with small stakes
- CONTRARIAN: fades the naive side and piles into turnovers
- MOMENTUM: sizes (and skips) by its current win/loss streak

The policy only computes proposals; recording them is the ledger's job.
"""

import random
import zlib
from dataclasses import dataclass

from blitz_markets.bots.registry import Bot, BotRegistry, Personality
from blitz_markets.common.config import SimulationConfig
from blitz_markets.common.logging import get_logger
from blitz_markets.events.interfaces import GameEvent
from blitz_markets.events.taxonomy import EventKind, is_significant, is_turnover
from blitz_markets.trading.interfaces import EventTrigger, TradeAction, TradeProposal

logger = get_logger(__name__)

# Chance a discretionary bot reacts to each kind
REACTION_CHANCE: dict[EventKind, float] = {
    EventKind.TOUCHDOWN: 0.9,
    EventKind.INTERCEPTION: 0.85,
    EventKind.FUMBLE: 0.8,
    EventKind.SAFETY: 0.95,
    EventKind.FIELD_GOAL: 0.6,
    EventKind.BIG_PLAY: 0.7,
    EventKind.SACK: 0.4,
    EventKind.TWO_POINT_CONVERSION: 0.75,
    EventKind.HALFTIME: 0.3,
    EventKind.GAME_START: 0.5,
    EventKind.GAME_END: 0.0,
    EventKind.PUNT: 0.1,
    EventKind.KICKOFF: 0.1,
    EventKind.PLAY: 0.05,
}

# Decimal odds for the BUY side of each kind's markets
BASE_ODDS: dict[EventKind, float] = {
    EventKind.TOUCHDOWN: 1.8,
    EventKind.FIELD_GOAL: 2.2,
    EventKind.INTERCEPTION: 2.5,
    EventKind.FUMBLE: 2.5,
    EventKind.SAFETY: 4.5,
    EventKind.BIG_PLAY: 2.0,
    EventKind.TWO_POINT_CONVERSION: 2.6,
    EventKind.HALFTIME: 1.9,
    EventKind.GAME_START: 2.0,
    EventKind.GAME_END: 1.6,
}
DEFAULT_BASE_ODDS = 2.0

MARKETS: dict[EventKind, tuple[str, ...]] = {
    EventKind.TOUCHDOWN: (
        "{team} next score",
        "Over/under total points",
        "{team} anytime TD scorer",
    ),
    EventKind.FIELD_GOAL: (
        "{team} next score",
        "Over/under total points",
        "Game goes to overtime",
    ),
    EventKind.SAFETY: (
        "Octopus scored (TD + 2pt same player)",
        "Over/under total points",
    ),
    EventKind.TWO_POINT_CONVERSION: (
        "Octopus scored (TD + 2pt same player)",
        "{team} next score",
    ),
    EventKind.INTERCEPTION: ("{team} turnover margin", "{team} defensive MVP"),
    EventKind.FUMBLE: ("{team} turnover margin", "{team} next score"),
    EventKind.BIG_PLAY: ("{team} receiver MVP", "{team} next score"),
    EventKind.HALFTIME: ("Halftime show first song", "Second-half total points"),
    EventKind.GAME_START: ("Game winner", "Coin toss heads", "National anthem over 2:00"),
    EventKind.GAME_END: ("Final margin over 7.5", "Game MVP"),
}
DEFAULT_MARKET = "Next score team"
UNATTRIBUTED_TEAM = "Either team"

CONSERVATIVE_KINDS: frozenset[EventKind] = frozenset(
    {EventKind.TOUCHDOWN, EventKind.SAFETY, EventKind.GAME_END}
)

PERSONALITY_STAKE_MULT: dict[Personality, float] = {
    Personality.AGGRESSIVE: 1.5,
    Personality.CONSERVATIVE: 0.5,
    Personality.CONTRARIAN: 1.0,
    Personality.MOMENTUM: 1.0,
}

HOT_STREAK = 3
COLD_STREAK = -3
MAX_MOMENTUM_MULT = 2.5
STAKE_JITTER = (0.8, 1.2)


@dataclass(frozen=True)
class Reaction:
    """A personality's decision to trade: side and stake scaling."""

    action: TradeAction
    size_multiplier: float = 1.0


def naive_action(kind: EventKind) -> TradeAction:
    """The crowd's reflex: buy the action, sell on turnovers."""
    return TradeAction.SELL if is_turnover(kind) else TradeAction.BUY


def momentum_multiplier(streak: int) -> float:
    """Stake multiplier for a momentum bot on the given streak."""
    if streak >= HOT_STREAK:
        return min(MAX_MOMENTUM_MULT, 1.0 + 0.25 * streak)
    if streak < 0:
        return max(0.2, 1.0 + 0.2 * streak)
    return 1.0


class ReactionPolicy:
    """Computes trade proposals for bots reacting to game events."""

    def __init__(
        self,
        registry: BotRegistry,
        config: SimulationConfig | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize policy.

        Args:
            registry: Bots allowed to trade.
            config: Stake and odds settings.
            rng: Random source for reaction rolls and jitter.
        """
        self.registry = registry
        self.config = config or SimulationConfig()
        self._rng = rng or random.Random(self.config.seed)

    def evaluate(
        self,
        bot: Bot,
        event: GameEvent,
        streak: int = 0,
    ) -> TradeProposal | None:
        """Decide whether a bot trades on an event.

        Args:
            bot: Bot considering the event.
            event: Game event.
            streak: Bot's current signed win/loss streak.

        Returns:
            A proposal, or None when the bot sits this one out, the bot is
            not registered, or the event is not significant.
        """
        if not is_significant(event.kind):
            return None
        if self.registry.find_bot(bot.id) is None:
            logger.debug("policy_unknown_bot", bot_id=bot.id)
            return None

        match bot.personality:
            case Personality.AGGRESSIVE:
                reaction = self._aggressive(bot, event)
            case Personality.CONSERVATIVE:
                reaction = self._conservative(bot, event)
            case Personality.CONTRARIAN:
                reaction = self._contrarian(bot, event)
            case Personality.MOMENTUM:
                reaction = self._momentum(bot, event, streak)

        if reaction is None:
            return None

        return self.build_proposal(
            bot,
            event,
            action=reaction.action,
            size_multiplier=reaction.size_multiplier,
        )

    def build_proposal(
        self,
        bot: Bot,
        event: GameEvent,
        market: str | None = None,
        action: TradeAction | None = None,
        size_multiplier: float = 1.0,
    ) -> TradeProposal:
        """Price a trade for a bot without personality gating.

        Args:
            bot: Trading bot.
            event: Triggering event.
            market: Market label override.
            action: Side override. Defaults to the personality's side.
            size_multiplier: Extra stake scaling on top of the personality's.

        Returns:
            Validated proposal.

        Raises:
            InvalidProposalError: If the priced trade is out of bounds.
        """
        if action is None:
            action = self.personality_action(bot, event.kind)

        return TradeProposal(
            bot_id=bot.id,
            market=market or self.select_market(bot, event),
            action=action,
            stake=self._stake(bot, size_multiplier),
            odds=self._odds(event.kind, action),
            trigger=EventTrigger.for_event(event.id, event.kind),
        )

    @staticmethod
    def personality_action(bot: Bot, kind: EventKind) -> TradeAction:
        """Side a bot takes on an event kind."""
        action = naive_action(kind)
        if bot.personality is Personality.CONTRARIAN:
            return action.inverse
        return action

    @staticmethod
    def select_market(bot: Bot, event: GameEvent) -> str:
        """Pick the market label for a bot's trade on an event.

        The pick is a stable hash of (bot, event), so re-pricing the same pair
        lands on the same market while different bots spread across markets.
        """
        templates = MARKETS.get(event.kind, (DEFAULT_MARKET,))
        index = zlib.crc32(f"{bot.id}:{event.id}".encode()) % len(templates)
        team = event.team_name or UNATTRIBUTED_TEAM
        return templates[index].format(team=team)

    # Personality decisions

    def _aggressive(self, bot: Bot, event: GameEvent) -> Reaction:
        return Reaction(naive_action(event.kind))

    def _conservative(self, bot: Bot, event: GameEvent) -> Reaction | None:
        if event.kind not in CONSERVATIVE_KINDS:
            return None
        return Reaction(naive_action(event.kind))

    def _contrarian(self, bot: Bot, event: GameEvent) -> Reaction | None:
        if not is_turnover(event.kind):
            chance = REACTION_CHANCE[event.kind] * (0.7 + 0.5 * bot.risk_tolerance)
            if self._rng.random() >= chance:
                return None
        return Reaction(naive_action(event.kind).inverse)

    def _momentum(self, bot: Bot, event: GameEvent, streak: int) -> Reaction | None:
        if streak <= COLD_STREAK:
            return None
        if streak < HOT_STREAK:
            chance = REACTION_CHANCE[event.kind] * (1.0 + 0.15 * streak)
            if self._rng.random() >= chance:
                return None
        return Reaction(naive_action(event.kind), momentum_multiplier(streak))

    # Pricing

    def _stake(self, bot: Bot, size_multiplier: float) -> float:
        low, high = STAKE_JITTER
        stake = (
            self.config.base_stake_unit
            * (1.0 + 9.0 * bot.risk_tolerance)
            * self._rng.uniform(low, high)
            * PERSONALITY_STAKE_MULT[bot.personality]
            * size_multiplier
        )
        return float(max(1, round(stake)))

    def _odds(self, kind: EventKind, action: TradeAction) -> float:
        base = BASE_ODDS.get(kind, DEFAULT_BASE_ODDS)
        if action is TradeAction.SELL:
            implied = 1.0 / base
            base = 1.0 / (1.0 - implied)

        jitter = self.config.odds_jitter
        odds = base + self._rng.uniform(-jitter, jitter)
        odds = max(self.config.min_odds, min(self.config.max_odds, odds))
        return round(odds, 2)
