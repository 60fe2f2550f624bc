"""Logging setup for the service process."""
from __future__ import annotations

import logging

from inkwell.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Configure the root logger according to the active environment."""
    level = logging.DEBUG if settings.environment == "development" else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # SQL echo is routed through SQLAlchemy's own logger.
    if not settings.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
