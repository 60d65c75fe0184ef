# freight_tracking/utils/logger.py
"""
Logging setup shared by the tracking service, scripts and tests.
Console output plus a rotating file under /logs/. The httpx client logs every
upstream request at INFO, so it is pinned to WARNING unless we run at DEBUG.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from freight_tracking.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
LOG_FILE = "tracking.log"

_NOISY_LIBRARIES = ("httpx", "httpcore")

_configured = False


def _build_handlers(fmt: logging.Formatter) -> list:
    console = logging.StreamHandler()
    console.setFormatter(fmt)
    handlers = [console]

    try:
        os.makedirs(LOG_DIR, exist_ok=True)
        # 10 × 5MB files, oldest dropped first
        file_handler = RotatingFileHandler(
            filename=os.path.join(LOG_DIR, LOG_FILE),
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)
    except OSError as e:
        console.handle(logging.makeLogRecord({
            "msg": f"File logging disabled ({e}); console only",
            "levelno": logging.WARNING,
            "levelname": "WARNING",
            "name": __name__,
        }))
    return handlers


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    for handler in _build_handlers(fmt):
        handler.setLevel(LOG_LEVEL)
        root.addHandler(handler)

    if LOG_LEVEL != "DEBUG":
        for name in _NOISY_LIBRARIES:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
