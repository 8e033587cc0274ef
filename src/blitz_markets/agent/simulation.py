"""Bot simulation facade.

Wires the registry, reaction policy, ledger, resolution engine, aggregator
and commentary generator into the operations the route layer calls. Every
collaborator is passed in (or built from config) by the process entry
point; nothing here is module-global.
"""

import random
import threading
from dataclasses import replace
from typing import Any

from blitz_markets.bots.commentary import CommentaryGenerator
from blitz_markets.bots.policy import ReactionPolicy
from blitz_markets.bots.registry import BotRegistry, default_registry
from blitz_markets.common.config import AppConfig, SimulationConfig
from blitz_markets.common.logging import get_logger
from blitz_markets.events.demo import DemoEventFeed
from blitz_markets.events.interfaces import GameEvent
from blitz_markets.events.taxonomy import is_significant
from blitz_markets.trading.interfaces import Trade, TradeAction, TradeProposal
from blitz_markets.trading.ledger import RetentionPolicy, TradeLedger
from blitz_markets.trading.resolution import ResolutionEngine
from blitz_markets.trading.stats import BotStanding, StatsAggregator

logger = get_logger(__name__)

# Opening demo events replayed by init_demo_data
DEMO_SEED_EVENTS = 4
SEED_EVENT_PREFIX = "demo-seed-"


class BotSimulation:
    """The brand-bot prediction market simulation.

    Usage:
        sim = BotSimulation.from_config(config)
        trades = sim.react_to_event(event)
        sim.resolve_pending_trades()
        board = sim.leaderboard()
    """

    def __init__(
        self,
        registry: BotRegistry,
        ledger: TradeLedger,
        policy: ReactionPolicy,
        resolver: ResolutionEngine,
        aggregator: StatsAggregator,
        commentary: CommentaryGenerator,
        config: SimulationConfig | None = None,
    ):
        """Initialize simulation from its collaborators."""
        self.registry = registry
        self.ledger = ledger
        self.policy = policy
        self.resolver = resolver
        self.aggregator = aggregator
        self.commentary = commentary
        self.config = config or SimulationConfig()

        self._seed_lock = threading.Lock()
        self._seeded = False

    @classmethod
    def from_config(
        cls,
        config: AppConfig | SimulationConfig | None = None,
        registry: BotRegistry | None = None,
    ) -> "BotSimulation":
        """Build a simulation with default collaborators.

        A configured seed makes every random draw (reactions, pricing,
        outcomes, commentary) reproducible.

        Args:
            config: Application or simulation config.
            registry: Bot registry. Defaults to the built-in brand bots.

        Returns:
            Ready-to-use simulation.
        """
        if isinstance(config, AppConfig):
            sim_config = config.simulation
        else:
            sim_config = config or SimulationConfig()

        registry = registry or default_registry()
        seeder = random.Random(sim_config.seed)

        ledger = TradeLedger(registry, retention=RetentionPolicy.from_config(sim_config))
        return cls(
            registry=registry,
            ledger=ledger,
            policy=ReactionPolicy(
                registry, sim_config, rng=random.Random(seeder.getrandbits(64))
            ),
            resolver=ResolutionEngine(
                ledger, sim_config, rng=random.Random(seeder.getrandbits(64))
            ),
            aggregator=StatsAggregator(registry, ledger),
            commentary=CommentaryGenerator(rng=random.Random(seeder.getrandbits(64))),
            config=sim_config,
        )

    def react_to_event(self, event: GameEvent) -> list[Trade]:
        """Run every bot's reaction policy against an event.

        Args:
            event: Incoming game event.

        Returns:
            Trades recorded for the bots that reacted, in registry order.
            Empty for non-significant events.
        """
        if not is_significant(event.kind):
            logger.debug("event_not_significant", event_id=event.id, kind=event.kind.value)
            return []

        trades: list[Trade] = []
        for bot in self.registry:
            stats = self.aggregator.stats_for_bot(bot.id)
            streak = stats.streak if stats else 0
            proposal = self.policy.evaluate(bot, event, streak=streak)
            if proposal is None:
                continue
            trades.append(self._record(proposal, event))

        logger.info(
            "bots_reacted",
            event_id=event.id,
            kind=event.kind.value,
            trades=len(trades),
            bots=len(self.registry),
        )
        return trades

    def execute_trade(
        self,
        bot_id: str,
        event: GameEvent,
        market: str | None = None,
        action: TradeAction | str | None = None,
    ) -> Trade | None:
        """Place a manual trade for one bot.

        Personality gating is skipped; significance is not.

        Args:
            bot_id: Bot to trade for.
            event: Triggering event.
            market: Market label override.
            action: Side override ("BUY"/"SELL").

        Returns:
            The recorded trade, or None if the bot is unknown, the event is
            not significant, or the action is not a valid side.
        """
        bot = self.registry.find_bot(bot_id)
        if bot is None:
            logger.info("trade_skipped_unknown_bot", bot_id=bot_id)
            return None
        if not is_significant(event.kind):
            logger.info("trade_skipped_not_significant", bot_id=bot_id, kind=event.kind.value)
            return None

        if isinstance(action, str):
            try:
                action = TradeAction(action.upper())
            except ValueError:
                logger.info("trade_skipped_bad_action", bot_id=bot_id, action=action)
                return None

        proposal = self.policy.build_proposal(bot, event, market=market, action=action)
        return self._record(proposal, event)

    def resolve_pending_trades(self) -> list[Trade]:
        """Resolve a batch of outstanding trades."""
        return self.resolver.resolve_pending_trades()

    def leaderboard(self) -> list[BotStanding]:
        """Bots ranked by total P&L."""
        return self.aggregator.leaderboard()

    def bots_with_stats(self) -> list[BotStanding]:
        """Bots with stats in registry order."""
        return self.aggregator.bots_with_stats()

    def recent_trades(self, limit: int | None = None) -> list[Trade]:
        """Newest trades first."""
        if limit is None:
            limit = self.config.recent_trades_limit
        return self.ledger.recent_trades(limit)

    def generate_comment(
        self,
        bot_id: str,
        trade: Trade,
        event: GameEvent | None = None,
    ) -> str | None:
        """Render commentary for a trade in a bot's voice (None if bot unknown)."""
        bot = self.registry.find_bot(bot_id)
        if bot is None:
            return None
        return self.commentary.generate_comment(bot, trade, event)

    def init_demo_data(self) -> list[Trade]:
        """Seed the ledger with reactions to the opening demo events.

        Idempotent: only the first call seeds.

        Returns:
            Trades created by this call.
        """
        with self._seed_lock:
            if self._seeded:
                return []
            self._seeded = True

        # Seeded occurrences never share an id with a replay of the script
        seed_events = [
            replace(event, id=f"{SEED_EVENT_PREFIX}{i}")
            for i, event in enumerate(DemoEventFeed().all_events()[:DEMO_SEED_EVENTS])
        ]

        trades: list[Trade] = []
        for event in seed_events:
            trades.extend(self.react_to_event(event))

        logger.info("demo_data_seeded", events=len(seed_events), trades=len(trades))
        return trades

    def snapshot(self, limit: int | None = None) -> dict[str, Any]:
        """Plain-data view of bots, leaderboard and recent trades."""
        return {
            "bots": [s.to_dict() for s in self.bots_with_stats()],
            "leaderboard": [s.to_dict() for s in self.leaderboard()],
            "trades": [t.to_dict() for t in self.recent_trades(limit)],
        }

    def _record(self, proposal: TradeProposal, event: GameEvent) -> Trade:
        comment = None
        if bot := self.registry.find_bot(proposal.bot_id):
            comment = self.commentary.generate_comment(bot, proposal, event)
        return self.ledger.record_trade(proposal, comment=comment)
