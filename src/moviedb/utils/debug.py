"""Logging for the moviedb client.

All records go to the ``moviedb`` logger. Nothing is printed unless the
application configures logging or calls setup_logger(); setting
MOVIEDB_DEBUG=1 makes setup_logger() default to DEBUG.

Request logs carry the verb and the compiled path only, never the api key or
session id, which travel in the query string or body.
"""

import logging
import os
from typing import Optional

LOGGER_NAME = "moviedb"
LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s: %(message)s"

logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


def debug_enabled() -> bool:
    """True when MOVIEDB_DEBUG=1 is set in the environment."""
    return os.getenv("MOVIEDB_DEBUG", "0") == "1"


def setup_logger(level: Optional[int] = None) -> logging.Logger:
    """Attach a console handler to the ``moviedb`` logger.

    Safe to call repeatedly; only one console handler is ever added.

    Args:
        level: Logging level; defaults to DEBUG when MOVIEDB_DEBUG=1, else INFO.

    Returns:
        The configured logger.
    """
    if level is None:
        level = logging.DEBUG if debug_enabled() else logging.INFO
    if not any(getattr(h, "_moviedb_console", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._moviedb_console = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def debug(msg: str) -> None:
    """Log a dispatched request or cache decision."""
    logger.debug(msg)


def info(msg: str) -> None:
    """Log a credential lifecycle event (token refresh, new session)."""
    logger.info(msg)


def warn(msg: str) -> None:
    """Log a response the API flagged as unsuccessful."""
    logger.warning(msg)
