"""Demo simulation runner.

Process entry point: loads config, sets up logging, builds the simulation,
seeds demo data once, then replays the scripted game through the bots and
logs the final standings.
"""

import sys

import click

from blitz_markets.agent.simulation import BotSimulation
from blitz_markets.common.config import AppConfig, load_config
from blitz_markets.common.logging import get_logger, setup_logging
from blitz_markets.events.demo import DemoEventFeed

logger = get_logger(__name__)


class DemoRunner:
    """Replays the demo game through a simulation."""

    def __init__(self, config: AppConfig, simulation: BotSimulation | None = None):
        """Initialize runner.

        Args:
            config: Application configuration.
            simulation: Simulation to drive. Built from config if omitted.
        """
        self.config = config
        self.simulation = simulation or BotSimulation.from_config(config)
        self.feed = DemoEventFeed(interval_seconds=config.demo.event_interval_seconds)

    def run(self, max_events: int | None = None) -> int:
        """Replay demo events, resolving trades after each.

        Args:
            max_events: Number of events to replay. Defaults to the whole game.

        Returns:
            Exit code (0 for success).
        """
        logger.info(
            "demo_run_starting",
            environment=self.config.environment,
            bots=len(self.simulation.registry),
        )

        try:
            if self.config.demo.seed_on_startup:
                self.simulation.init_demo_data()

            events = self.feed.all_events()
            if max_events is not None:
                events = events[:max_events]

            for event in events:
                trades = self.simulation.react_to_event(event)
                resolved = self.simulation.resolve_pending_trades()
                for trade in trades:
                    logger.info(
                        "bot_trade",
                        bot_id=trade.bot_id,
                        market=trade.market,
                        action=trade.action.value,
                        stake=trade.stake,
                        odds=trade.odds,
                        comment=trade.comment,
                    )
                logger.info(
                    "demo_event_processed",
                    event_id=event.id,
                    kind=event.kind.value,
                    trades=len(trades),
                    resolved=len(resolved),
                )

            for standing in self.simulation.leaderboard():
                logger.info(
                    "leaderboard_entry",
                    rank=standing.rank,
                    bot=standing.bot.name,
                    total_pnl=standing.stats.total_pnl,
                    win_rate=standing.stats.win_rate,
                    streak=standing.stats.streak,
                    trades=standing.stats.total_trades,
                )

            logger.info("demo_run_completed", events=len(events))
            return 0

        except Exception as e:
            logger.exception("demo_run_failed", error=str(e))
            return 1


def run_demo(config_path: str, max_events: int | None = None, seed: int | None = None) -> int:
    """Run the demo with given config.

    Args:
        config_path: Path to configuration file.
        max_events: Number of demo events to replay.
        seed: Overrides the configured simulation seed.

    Returns:
        Exit code.
    """
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    if seed is not None:
        config.simulation.seed = seed

    setup_logging(
        config.logging,
        environment=config.environment,
        seed=config.simulation.seed,
    )
    logger.info("config_loaded", config_path=config_path, environment=config.environment)

    return DemoRunner(config).run(max_events=max_events)


@click.command()
@click.option(
    "--config",
    "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--events",
    "-n",
    type=click.IntRange(min=0),
    default=None,
    help="Number of demo events to replay (default: whole game)",
)
@click.option("--seed", type=int, default=None, help="Random seed for a reproducible run")
def main(config: str, events: int | None, seed: int | None) -> None:
    """Replay the demo game through the brand bots."""
    exit_code = run_demo(config, max_events=events, seed=seed)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
