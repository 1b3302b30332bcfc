"""
utils/logger.py
---------------
Logging setup shared by every module.
Call `get_logger(__name__)`; the root logger is configured on first use
with the level from LOG_LEVEL.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_initialized = False


def _init_logging() -> None:
    """Attach a stdout handler to the root logger, unless the host app already did."""
    global _initialized
    if _initialized:
        return
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for `name`, configuring logging on the first call."""
    _init_logging()
    return logging.getLogger(name)
