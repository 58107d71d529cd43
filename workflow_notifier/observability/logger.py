"""structlog configuration shared by the CLI and library entrypoints."""

from __future__ import annotations

import logging
import sys

import structlog


def observability_configure_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog processors and output once per process.

    Logs go to stderr so stdout stays free for dry-run payload output.

    Args:
        log_level: Minimum level name, e.g. `INFO`.
        log_format: `console` for human-readable output, `json` for JSON lines.

    Returns:
        None: Configures structlog globally as a side effect.

    Raises:
        ValueError: Raised when the level name is unknown.
    """

    level_value = logging.getLevelName(log_level.strip().upper())
    if not isinstance(level_value, int):
        raise ValueError(f"unknown log level: {log_level}")

    renderer = structlog.processors.JSONRenderer() if log_format == "json" else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
