"""
Logging configuration and utilities.

All package loggers live below the ``partial_types`` logger, which carries a
single console handler once ``setup_logging`` has run.
"""

import logging
import os
from typing import Optional

LOGGER_NAME = "partial_types"
LEVEL_ENV_VAR = "PARTIAL_TYPES_LOG_LEVEL"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the package.

    Args:
        level: Logging level name; defaults to $PARTIAL_TYPES_LOG_LEVEL or WARNING
        log_file: Optional file path for log output
    """
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR, "WARNING")

    log_level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the package logger.

    Args:
        name: Logger name (typically __name__)
    """
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
