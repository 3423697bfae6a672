"""Structured logging configuration for diffpost.

This module provides structlog-based logging with:
- Pretty console output (default)
- JSON output (when env var DIFFPOST_LOG_FORMAT=json or forced by the CLI)

Usage:
    from diffpost.logging import get_logger, configure_logging

    # Configure logging once at application startup
    configure_logging()

    log = get_logger(__name__)
    log.info("fragment_posted", part=1, total=3)

Library components never configure logging themselves. They accept a
logger in their constructor and fall back to ``get_logger(__name__)``.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog
from structlog.types import Processor

__all__ = [
    "LOG_LEVELS",
    "get_logger",
    "configure_logging",
    "parse_log_level",
]

# Environment variable for log format
LOG_FORMAT_ENV_VAR = "DIFFPOST_LOG_FORMAT"

# Environment variable for log level
LOG_LEVEL_ENV_VAR = "DIFFPOST_LOG_LEVEL"

# Default log level
DEFAULT_LOG_LEVEL = "INFO"

#: Level names accepted by the CLI and the environment.
LOG_LEVELS: tuple[str, ...] = ("debug", "info", "warning", "error")


def parse_log_level(name: str) -> int:
    """Convert a level name into a ``logging`` level constant.

    Args:
        name: Case-insensitive level name ("debug", "info", ...).

    Returns:
        Logging level constant (e.g., logging.INFO).

    Raises:
        ValueError: If the name is not one of LOG_LEVELS.
    """
    normalized = name.strip().lower()
    if normalized == "warn":
        normalized = "warning"
    if normalized not in LOG_LEVELS:
        raise ValueError(
            f"invalid log level: {name} (valid levels: {', '.join(LOG_LEVELS)})"
        )
    level: int = getattr(logging, normalized.upper())
    return level


def _get_log_level() -> int:
    """Get the log level from environment or default."""
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
    try:
        return parse_log_level(level_name)
    except ValueError:
        return logging.INFO


def _is_json_output() -> bool:
    """Check if JSON output is enabled via DIFFPOST_LOG_FORMAT=json."""
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _get_shared_processors() -> list[Processor]:
    """Get processors shared between stdlib and structlog."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _get_console_processors() -> list[Processor]:
    return [
        *_get_shared_processors(),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def _get_json_processors() -> list[Processor]:
    return [
        *_get_shared_processors(),
        structlog.processors.dict_tracebacks,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog for the application.

    This should be called once at application startup. Subsequent calls
    will reconfigure logging.

    Args:
        force_json: Force JSON output regardless of environment variable.
        level: Override log level. If None, reads from DIFFPOST_LOG_LEVEL.
    """
    use_json = force_json or _is_json_output()
    log_level = level if level is not None else _get_log_level()

    processors = _get_json_processors() if use_json else _get_console_processors()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    renderer: Processor
    if use_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=_get_shared_processors(),
        )
    )

    root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the caller's module name.

    Returns:
        A bound structlog logger.
    """
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log
