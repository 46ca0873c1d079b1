"""
Logging configuration for the application.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Only warnings from these are worth seeing
QUIET_LOGGERS = ("uvicorn.access", "asyncio", "psycopg", "psycopg.pool")


def resolve_level(level: str | int | None = None) -> int:
    """
    Turn a level name into a `logging` level.

    Args:
        level: A level name such as "debug", a level number, or None to read
            `LOG_LEVEL` from the environment, defaulting to INFO.

    Raises:
        ValueError: If the name is not a known logging level.
    """
    if isinstance(level, int):
        return level
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").strip().upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return value


def setup_logging(level: str | int | None = None) -> int:
    """
    Send application logs to stdout and quieten third-party loggers.

    Returns:
        The level applied to the root logger.
    """
    log_level = resolve_level(level)
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger().setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
    return log_level
