"""Structured logging for simulation runs.

Every line carries the run context (environment and simulation seed) bound
by ``setup_logging``, so a replayed demo can be traced back to the seed that
produced its trades.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from blitz_markets.common.config import LoggingConfig

PACKAGE_LOGGER = "blitz_markets"


def setup_logging(config: LoggingConfig | None = None, **run_context: Any) -> None:
    """Configure structured logging.

    Args:
        config: Logging configuration. Uses defaults if not provided.
        **run_context: Key/values bound to every log line of this run
            (e.g. ``environment``, ``seed``). None values are skipped.
    """
    if config is None:
        config = LoggingConfig()

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        **{key: value for key, value in run_context.items() if value is not None}
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    handlers: list[logging.Handler] = [handler]
    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    level = getattr(logging, config.level.upper())

    # Third-party libraries stay at WARNING; only the engine logs at the run level
    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(max(level, logging.WARNING))

    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name. Defaults to 'blitz_markets'.

    Returns:
        Bound logger instance.
    """
    return structlog.get_logger(name or PACKAGE_LOGGER)
