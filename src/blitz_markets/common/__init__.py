"""Common utilities: config, logging, errors, time."""

from blitz_markets.common.config import AppConfig, SimulationConfig, load_config
from blitz_markets.common.errors import BlitzMarketsError, InvalidProposalError
from blitz_markets.common.logging import get_logger, setup_logging
from blitz_markets.common.time_utils import parse_iso, start_of_day, utc_now

__all__ = [
    "AppConfig",
    "SimulationConfig",
    "load_config",
    "BlitzMarketsError",
    "InvalidProposalError",
    "setup_logging",
    "get_logger",
    "utc_now",
    "start_of_day",
    "parse_iso",
]
