"""Logging configuration for the job tracker backend."""

import logging
import sys
from typing import Optional

from jobtracker.core.config import get_settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a configured logger instance."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(get_settings().log_level.upper())
    if level is not None:
        logger.setLevel(level)
    return logger
