"""
Logging configuration for the dashboard.
"""
import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "HEALTH_LOG_LEVEL"
LOGGER_NAMES = ("core", "app")


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> None:
    """
    Configure the package loggers.

    Args:
        level: Logging level; defaults to ``HEALTH_LOG_LEVEL`` or INFO.
        log_file: Optional path to also write logs to.
    """
    if level is None:
        level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # avoid duplicate output when Streamlit re-runs the script
        if logger.hasHandlers():
            logger.handlers.clear()
        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    logging.getLogger("core").info("Logging initialized.")
