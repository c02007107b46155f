# File: translatable/core/logging_config.py
"""
Logging setup for applications embedding translatable.
"""

import logging
from typing import Optional

from translatable.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure root logging and return the package logger.

    Args:
        level: Level name; defaults to settings.LOG_LEVEL

    Returns:
        The "translatable" logger
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    logger = logging.getLogger("translatable")
    logger.setLevel(log_level)

    logger.info(
        f"Configured logger ('{logger.name}') effective level: "
        f"{logger.getEffectiveLevel()} ({logging.getLevelName(logger.getEffectiveLevel())})"
    )
    return logger
