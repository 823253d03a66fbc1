"""
Logging setup for the ``shapemorph`` package logger.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by the entry point.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "shapemorph"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Send package log records to stdout and, optionally, to ``log_file``.

    Calling it again replaces the handlers of the previous call.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        # Truncated on every run
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized (level={logging.getLevelName(level)}).")
    return logger
