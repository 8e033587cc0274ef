"""Bot registry: the fixed catalog of brand bots."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Personality(str, Enum):
    """Trading personality of a bot."""

    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"
    CONTRARIAN = "contrarian"
    MOMENTUM = "momentum"


@dataclass(frozen=True)
class Bot:
    """Brand bot identity and personality parameters."""

    id: str
    name: str
    brand: str
    avatar: str
    color: str
    personality: Personality
    tagline: str = ""
    risk_tolerance: float = 0.5  # 0-1, scales stake and reaction chance

    def __post_init__(self) -> None:
        if not 0.0 <= self.risk_tolerance <= 1.0:
            raise ValueError(f"risk_tolerance must be within [0, 1], got {self.risk_tolerance}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "avatar": self.avatar,
            "color": self.color,
            "personality": self.personality.value,
            "tagline": self.tagline,
            "risk_tolerance": self.risk_tolerance,
        }


DEFAULT_BOTS: tuple[Bot, ...] = (
    Bot(
        id="pizzashack",
        name="PizzaShack Bot",
        brand="PizzaShack",
        avatar="🍕",
        color="#E31837",
        personality=Personality.AGGRESSIVE,
        tagline="Hot takes, fresh from the oven",
        risk_tolerance=0.8,
    ),
    Bot(
        id="pizzashack-conservative",
        name="PizzaShack Value",
        brand="PizzaShack",
        avatar="🍕",
        color="#006B3F",
        personality=Personality.CONSERVATIVE,
        tagline="Calculated slices only",
        risk_tolerance=0.3,
    ),
    Bot(
        id="pizzashack-contrarian",
        name="PizzaShack Contrarian",
        brand="PizzaShack",
        avatar="🍕",
        color="#FFB612",
        personality=Personality.CONTRARIAN,
        tagline="When everyone zigs, we zag",
        risk_tolerance=0.6,
    ),
    Bot(
        id="pizzashack-momentum",
        name="PizzaShack Rush",
        brand="PizzaShack",
        avatar="🍕",
        color="#1D4ED8",
        personality=Personality.MOMENTUM,
        tagline="Delivery follows the heat",
        risk_tolerance=0.5,
    ),
)


class BotRegistry:
    """Ordered, read-only catalog of bots.

    Built once at process start; lookups need no locking.
    """

    def __init__(self, bots: Iterable[Bot]):
        """Initialize registry.

        Args:
            bots: Bots in display order.

        Raises:
            ValueError: If two bots share an id.
        """
        self._bots: tuple[Bot, ...] = tuple(bots)
        self._by_id: dict[str, Bot] = {}
        for bot in self._bots:
            if bot.id in self._by_id:
                raise ValueError(f"Duplicate bot id: {bot.id}")
            self._by_id[bot.id] = bot

    def __iter__(self) -> Iterator[Bot]:
        return iter(self._bots)

    def __len__(self) -> int:
        return len(self._bots)

    def __contains__(self, bot_id: object) -> bool:
        return bot_id in self._by_id

    @property
    def ids(self) -> list[str]:
        """Bot ids in registry order."""
        return [bot.id for bot in self._bots]

    def find_bot(self, bot_id: str) -> Bot | None:
        """Look up a bot by id (None if not registered)."""
        return self._by_id.get(bot_id)


def default_registry() -> BotRegistry:
    """Build the registry of the default brand bots."""
    return BotRegistry(DEFAULT_BOTS)
