from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str = "collector") -> logging.Logger:
    """Logger writing to stderr so stdout stays free for JSON results.

    The level comes from ``COLLECTOR_LOG_LEVEL`` (default INFO).
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(os.getenv("COLLECTOR_LOG_LEVEL", "INFO").upper())
    return logger
