"""Logging configuration for the Nexia entry points.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
attached here, once, by the CLI callback and the API lifespan.
"""

from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler

from nexia.config import settings

LOGGER_NAME = "nexia"
SESSION_ID = uuid.uuid4().hex[:8]

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s | sid=%(session)s"


class EnsureSessionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session"):
            record.session = SESSION_ID
        return True


def setup_logging(to_file: bool = True, console: bool = True) -> logging.Logger:
    """Attach file and/or console handlers to the ``nexia`` logger.

    Safe to call more than once: a logger that already has handlers is
    returned untouched.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    fmt = logging.Formatter(_FORMAT)
    session_filter = EnsureSessionFilter()

    if to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        log_path = settings.log_dir / f"{LOGGER_NAME}.log"
        fh = RotatingFileHandler(
            log_path, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        fh.addFilter(session_filter)
        logger.addHandler(fh)

    if console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(getattr(logging, settings.log_level, logging.INFO))
        ch.setFormatter(fmt)
        ch.addFilter(session_filter)
        logger.addHandler(ch)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.debug("Logging initialised (level=%s)", settings.log_level)
    return logger
