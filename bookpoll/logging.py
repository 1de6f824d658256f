"""Structured logging for the poll API and scripts.

Events go through the standard library's logging module, so the Vercel
runtime picks them up from stdout along with anything httpx logs. The
handler emits one JSON object per line; scripts get the console renderer.
"""

import logging
import sys

import structlog
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    TimeStamper,
    format_exc_info,
)

# httpx logs every request at INFO, once per KV command
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(cli_mode: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        cli_mode: If True, render pretty console output instead of JSON.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    # No-op if the host (or pytest) already installed root handlers
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if cli_mode:
        from structlog.dev import ConsoleRenderer
        renderer = ConsoleRenderer(colors=sys.stdout.isatty())
    else:
        renderer = JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            TimeStamper(fmt="iso", utc=True),
            StackInfoRenderer(),
            format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, typically named after the calling module."""
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()
