"""Logging configuration."""
import logging
import sys

from app.core.config import settings

# Chatty libraries that only matter when something goes wrong
QUIET_LOGGERS = ("httpx", "httpcore", "aiosqlite", "asyncio")


def setup_logging() -> None:
    """Configure application logging from LOG_LEVEL and LOG_SQL."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.log_sql else logging.WARNING
    )
