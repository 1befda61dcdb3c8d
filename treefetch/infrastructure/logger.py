"""
Package logger for treefetch.
"""

import logging
import sys


LOGGER_NAME = "treefetch"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str = LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """Create the package logger with a single stderr handler."""

    _logger = logging.getLogger(name)
    if not _logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        _logger.addHandler(handler)
    _logger.setLevel(level)
    return _logger


logger = setup_logger()
