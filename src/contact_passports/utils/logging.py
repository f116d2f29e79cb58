"""structlog setup.

Events are rendered by structlog and handed to the standard library root
logger, so passport events, SQLAlchemy echo output and alembic messages end
up on the same stream.
"""

import logging
import sys
from typing import List, Optional, TextIO

import structlog
from structlog.stdlib import BoundLogger, LoggerFactory
from structlog.types import Processor

from contact_passports.config import Settings, get_settings


def build_processors(settings: Settings) -> List[Processor]:
    """Processor chain ending in the renderer picked by ``log_format``."""
    renderer: Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        renderer,
    ]


def setup_logging(
    settings: Optional[Settings] = None, stream: Optional[TextIO] = None
) -> None:
    """Send structlog events to ``stream`` (stdout by default).

    The root handler is only installed when none exists yet; the level is
    applied either way.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)

    logging.basicConfig(format="%(message)s", stream=stream or sys.stdout)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=build_processors(settings),
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> BoundLogger:
    return structlog.get_logger(name)
