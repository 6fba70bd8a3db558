"""
Structured logging configuration using structlog.

JSON lines when LOG_FORMAT=json, coloured console output otherwise. Logs go
to stdout; challenge and solution bytes are never logged.
"""

import logging
import sys

import structlog

from vdf_gateway.config import Settings, settings


def setup_logging(config: Settings = settings) -> None:
    """Configure structlog and route stdlib logging through stdout. Call once at startup."""
    level = getattr(logging, config.log_level.upper())

    if config.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    # uvicorn logs every request; the logging middleware already does that
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None):
    """Return a structlog logger, bound to `logger_name` when a name is given."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
