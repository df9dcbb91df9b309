"""Logging configuration for the query engine."""

import sys

from loguru import logger

from settings import LOG_DIR, LOG_LEVEL, LOG_RETENTION, LOG_TO_FILE

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <cyan>{name}</cyan> | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {name}:{function}:{line} | {message}"


def setup_logging(level: str | None = None, to_file: bool | None = None):
    """Configure loguru sinks.

    Level and file output default to JSONAPI_LOG_LEVEL and JSONAPI_LOG_TO_FILE.
    The file sink always records DEBUG, so cache hits and dispatched URLs are
    kept even when the console is quieter.
    """
    level = (level or LOG_LEVEL).upper()
    to_file = LOG_TO_FILE if to_file is None else to_file

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(
            LOG_DIR / "jsonapi_{time:YYYY-MM-DD}.log",
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="00:00",
            retention=LOG_RETENTION,
            compression="gz",
            enqueue=True,
        )
        logger.debug("Logging to {} (retention {})", LOG_DIR, LOG_RETENTION)

    return logger
