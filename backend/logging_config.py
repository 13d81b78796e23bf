"""Centralized logging configuration."""

import logging

from config import settings

# Third-party loggers that are too chatty at INFO/DEBUG
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic.runtime.migration",
    "httpx",
    "httpcore",
    "multipart",
)


def setup_logging(level: str | None = None) -> None:
    """Configure logging for the application and scripts.

    The root level comes from ``level`` when given, else settings.LOG_LEVEL.
    Orders on different instruments run on different worker threads, so
    the thread name is part of every line.
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        level=getattr(logging, (level or settings.LOG_LEVEL).upper()),
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
