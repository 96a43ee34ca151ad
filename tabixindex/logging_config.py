"""
Centralized logging configuration for tabixindex

Every module obtains its logger through get_logger(__name__), so all index
building and query diagnostics share one format and one level. The level is
read from the TABIXINDEX_LOG_LEVEL environment variable the first time a
logger is created, and can be raised or lowered afterwards with set_log_level()
(the command-line front end does this for --verbose/--quiet).

Environment Variables:
    TABIXINDEX_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
                          Default: WARNING

Examples:
    >>> from tabixindex.logging_config import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.warning("Skipping malformed record at line %d", 12)

    # Show seek accounting for every query:
    >>> import os
    >>> os.environ["TABIXINDEX_LOG_LEVEL"] = "DEBUG"
"""

import logging
import os

LOG_LEVEL_ENV = "TABIXINDEX_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Every tabixindex logger is a child of this one
ROOT_LOGGER_NAME = "tabixindex"


def _level_from_env() -> tuple[int, str | None]:
    """Resolve the configured level, returning an invalid name if one was given"""
    level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if isinstance(level, int):
        return level, None
    return logging.WARNING, level_name


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the specified name

    Handlers live on the package root logger, so repeated calls never stack
    duplicate handlers and records still propagate to the Python root logger
    (pytest's caplog relies on that).

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Configured logger instance
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

        level, invalid_name = _level_from_env()
        root.setLevel(level)
        if invalid_name is not None:
            root.warning(
                f"Invalid {LOG_LEVEL_ENV} '{invalid_name}'. Using WARNING instead. "
                f"Valid levels: DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )

    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return root.getChild(name)


def set_log_level(level: int | str) -> None:
    """
    Override the package log level (e.g. from a --verbose flag)

    Args:
        level: A logging level number or name such as "DEBUG"
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    get_logger(ROOT_LOGGER_NAME).setLevel(level)
