"""Centralized logging configuration for the images optimizer."""

import os
import sys
import logging
from typing import Optional


DEFAULT_LOGGER_NAME = "images-optimizer"

LOG_FORMATS = {
    "structured": (
        "%(asctime)s | %(name)s | %(levelname)-8s | "
        "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
    ),
    "simple": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Configure a logger that writes to stdout.

    The handler is attached once; later calls only update the level.

    Args:
        name: Logger name (defaults to "images-optimizer")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if not logger.handlers:
        format_name = os.getenv("LOG_FORMAT", format_type).lower()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                LOG_FORMATS.get(format_name, LOG_FORMATS["simple"]),
                datefmt=DATE_FORMAT,
            )
        )
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get the package logger or one of its component loggers.

    Component loggers live under the package logger, so
    ``get_logger("scheduler")`` returns ``images-optimizer.scheduler``. They
    carry no handler of their own and inherit level and output from the
    package logger, which is configured on first use.

    Args:
        name: Component name, or a name already under the package logger

    Returns:
        Logger instance
    """
    root = logging.getLogger(DEFAULT_LOGGER_NAME)
    if not root.handlers:
        setup_logger(DEFAULT_LOGGER_NAME)
    if name == DEFAULT_LOGGER_NAME:
        return root
    if not name.startswith(DEFAULT_LOGGER_NAME + "."):
        name = f"{DEFAULT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_debug(enabled: bool = True) -> None:
    """Switch the package logger, and every component under it, to DEBUG or back to INFO."""
    get_logger().setLevel(logging.DEBUG if enabled else logging.INFO)


# Create default logger instance
logger = setup_logger()
