"""Application configuration loading and models."""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator


class SimulationConfig(BaseModel):
    """Bot simulation tuning knobs."""

    # Stake sizing
    base_stake_unit: float = Field(default=100.0, gt=0)

    # Odds shaping
    odds_jitter: float = Field(default=0.15, ge=0)
    min_odds: float = Field(default=1.05, ge=1.01)  # Stays above even money after rounding
    max_odds: float = Field(default=10.0, gt=1.0)

    # Resolution
    resolution_batch_size: int = Field(default=5, ge=1)
    min_win_probability: float = Field(default=0.05, gt=0, lt=1)
    max_win_probability: float = Field(default=0.95, gt=0, lt=1)

    # Retention
    retention_max_trades: int = Field(default=500, ge=1)
    retention_max_age_hours: float | None = Field(default=None, gt=0)

    recent_trades_limit: int = Field(default=50, ge=1)
    seed: int | None = None  # None = non-reproducible runs

    @model_validator(mode="after")
    def _check_ranges(self) -> "SimulationConfig":
        if self.min_odds >= self.max_odds:
            raise ValueError("min_odds must be below max_odds")
        if self.min_win_probability >= self.max_win_probability:
            raise ValueError("min_win_probability must be below max_win_probability")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"  # "json" or "console"
    log_file: str | None = None


class DemoConfig(BaseModel):
    """Scripted demo game configuration."""

    seed_on_startup: bool = True
    event_interval_seconds: int = Field(default=15, ge=1)


class AppConfig(BaseModel):
    """Root application configuration."""

    environment: str = Field(default="dev", description="Environment name (dev/prod)")
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    demo: DemoConfig = Field(default_factory=DemoConfig)


def load_config(config_path: str | Path) -> AppConfig:
    """Load configuration from a YAML file with environment variable substitution.

    Environment variables can override config values. The following env vars are checked:
    - BLITZ_ENVIRONMENT: Environment name
    - BLITZ_SEED: Simulation random seed
    - BLITZ_LOG_LEVEL: Logging level

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Parsed AppConfig instance.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the config file is invalid.
    """
    load_dotenv()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        raw_config: dict[str, Any] = yaml.safe_load(f) or {}

    _apply_env_overrides(raw_config)

    return AppConfig(**raw_config)


def _apply_env_overrides(config: dict[str, Any]) -> None:
    """Apply environment variable overrides to config dict.

    Args:
        config: Configuration dictionary to modify in place.
    """
    if "simulation" not in config:
        config["simulation"] = {}
    if "logging" not in config:
        config["logging"] = {}

    if environment := os.environ.get("BLITZ_ENVIRONMENT"):
        config["environment"] = environment

    if seed := os.environ.get("BLITZ_SEED"):
        config["simulation"]["seed"] = int(seed)

    if level := os.environ.get("BLITZ_LOG_LEVEL"):
        config["logging"]["level"] = level
