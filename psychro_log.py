"""
Logging configuration for the psychrometric engine.

Provides consistent log formatting across all modules.
"""

import logging
import sys
from typing import Dict

_loggers: Dict[str, logging.Logger] = {}

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: int = logging.WARNING) -> logging.Logger:
    """
    Get a configured logger for a module.

    Args:
        name: Logger name (e.g., 'psychro', 'psychro_engine')
        level: Handler level (default: WARNING; solver diagnostics are DEBUG)

    Returns:
        Configured logger
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    _loggers[name] = logger
    return logger
