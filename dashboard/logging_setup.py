"""
Logging setup for the engine's module loggers.
"""
from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Attach one stderr handler to the ``dashboard`` logger (idempotent).

    Level defaults to the DASHBOARD_LOG_LEVEL env var, else INFO.
    """
    level = level or os.environ.get("DASHBOARD_LOG_LEVEL", "INFO")
    logger = logging.getLogger("dashboard")
    logger.setLevel(level if isinstance(level, int) else str(level).upper())
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
