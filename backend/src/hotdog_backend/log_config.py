"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level_name: str) -> int:
    """Translate a level name such as ``"debug"`` into a logging constant."""
    level = logging.getLevelName(level_name.upper())
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(level_name: str = "INFO") -> logging.Logger:
    """Send backend records to stdout at *level_name* and return the root logger."""
    level = resolve_level(level_name)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout)
    logger = logging.getLogger("hotdog_backend")
    logger.setLevel(level)
    return logger


__all__ = ["LOG_FORMAT", "configure_logging", "resolve_level"]
