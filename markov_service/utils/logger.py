"""
Logging helpers shared by the service, router and CLI layers.
"""

import logging
import sys
from typing import Optional

from markov_service.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with a single stream handler attached.

    Calling it again for the same name reuses the existing handler.

    Args:
        name: Logger name, usually ``__name__``
        level: Level name; defaults to ``settings.LOG_LEVEL``
    """
    logger = logging.getLogger(name)
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
