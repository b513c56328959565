"""
Logging setup.
"""

from __future__ import annotations

import logging
import os

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Libraries that log per-frame at INFO
NOISY_LOGGERS = ("ultralytics", "uvicorn.access")


def setup_logging(log_path: str, log_level: str) -> None:
    """
    Log to `log_path` and to stderr.

    An empty `log_path` logs to stderr only.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
