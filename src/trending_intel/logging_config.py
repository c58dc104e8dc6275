"""Process-wide logging for the pipeline, the newsletter run and the API.

Every module asks for its logger through ``get_logger(__name__)``. The first
call installs one stream handler on the root logger; ``TRENDING_INTEL_LOG_LEVEL``
(default ``INFO``) is re-read on every call so a level change applies to loggers
created afterwards.
"""

import logging
import os

LEVEL_ENV = "TRENDING_INTEL_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# httpx logs every request at INFO, which buries pipeline progress
QUIET_LOGGERS = ("httpx", "httpcore")

_configured = False


def log_level() -> int:
    name = os.getenv(LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring the root handler on first use."""
    global _configured

    level = log_level()
    root = logging.getLogger()

    if not _configured:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
        for quiet in QUIET_LOGGERS:
            logging.getLogger(quiet).setLevel(max(level, logging.WARNING))
        _configured = True

    root.setLevel(level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger
