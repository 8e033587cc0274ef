"""Pytest configuration and fixtures."""

import logging
import tempfile
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
import structlog
import yaml

from blitz_markets.agent.simulation import BotSimulation
from blitz_markets.bots.registry import BotRegistry, default_registry
from blitz_markets.common.config import AppConfig, SimulationConfig, load_config
from blitz_markets.events.interfaces import GameEvent
from blitz_markets.events.taxonomy import EventKind
from blitz_markets.trading.interfaces import EventTrigger, TradeAction, TradeProposal
from blitz_markets.trading.ledger import TradeLedger


class ScriptedRandom:
    """Stand-in for random.Random with scripted draws.

    ``random()`` returns the scripted values in order (then repeats the
    last one), ``uniform()`` returns the midpoint of its range and
    ``choice()`` returns the first element.
    """

    def __init__(self, values: Iterable[float] = (0.0,)):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value

    def uniform(self, a: float, b: float) -> float:
        return (a + b) / 2

    def choice(self, seq: Sequence[Any]) -> Any:
        return seq[0]


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 2, 8, 23, 30, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def restore_logging():
    """Undo root logger and run-context changes made by setup_logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def dev_config_path(temp_dir: Path) -> Path:
    """Create a temporary dev config file."""
    config_data = {
        "environment": "test",
        "simulation": {
            "base_stake_unit": 100,
            "odds_jitter": 0.1,
            "resolution_batch_size": 5,
            "retention_max_trades": 200,
            "seed": 1234,
        },
        "logging": {
            "level": "DEBUG",
            "format": "console",
            "log_file": None,
        },
        "demo": {
            "seed_on_startup": True,
            "event_interval_seconds": 15,
        },
    }
    config_path = temp_dir / "test_config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def config(dev_config_path: Path) -> AppConfig:
    """Load test configuration."""
    return load_config(dev_config_path)


@pytest.fixture
def sim_config() -> SimulationConfig:
    """Simulation config with a fixed seed."""
    return SimulationConfig(seed=42)


@pytest.fixture
def registry() -> BotRegistry:
    """Default registry: one bot per personality."""
    return default_registry()


@pytest.fixture
def clock() -> FrozenClock:
    """Frozen clock."""
    return FrozenClock()


@pytest.fixture
def ledger(registry: BotRegistry, clock: FrozenClock) -> TradeLedger:
    """Empty ledger on a frozen clock."""
    return TradeLedger(registry, clock=clock)


@pytest.fixture
def simulation(sim_config: SimulationConfig) -> BotSimulation:
    """Seeded simulation over the default registry."""
    return BotSimulation.from_config(sim_config)


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom instances."""
    return ScriptedRandom


@pytest.fixture
def make_event():
    """Factory for game events."""

    def _make(kind: EventKind = EventKind.TOUCHDOWN, event_id: str = "evt-1", **kwargs: Any) -> GameEvent:
        return GameEvent(id=event_id, kind=kind, **kwargs)

    return _make


@pytest.fixture
def make_proposal():
    """Factory for trade proposals."""

    def _make(
        bot_id: str = "pizzashack",
        stake: float = 100.0,
        odds: float = 2.0,
        action: TradeAction = TradeAction.BUY,
        market: str = "Chiefs next score",
        event_id: str = "evt-1",
        kind: EventKind = EventKind.TOUCHDOWN,
    ) -> TradeProposal:
        return TradeProposal(
            bot_id=bot_id,
            market=market,
            action=action,
            stake=stake,
            odds=odds,
            trigger=EventTrigger.for_event(event_id, kind),
        )

    return _make
