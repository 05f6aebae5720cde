"""Logging configuration."""

import logging
import sys
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "local_dedup"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[Path] = None,
) -> None:
    """Configure the package logger.

    Only the ``local_dedup`` logger is touched, so calling this again (one
    call per CLI invocation) replaces the previous handlers instead of
    stacking them, and the root logger stays untouched.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for log output
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        # Undecodable file names end up in messages; escape rather than fail
        handlers.append(
            logging.FileHandler(log_file, encoding="utf-8", errors="backslashreplace")
        )

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package hierarchy.

    Args:
        name: Logger name (typically __name__)
    """
    return logging.getLogger(name)
