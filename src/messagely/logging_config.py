"""structlog setup.

Every module does `logger = structlog.get_logger()` and logs dotted
event names with keyword context. RequestIdMiddleware binds request_id
into contextvars, which merge_contextvars folds into every entry.
"""

import logging
import sys

import structlog

from messagely.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure stdlib logging + structlog from settings."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
