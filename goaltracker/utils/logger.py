"""
Named loggers for the goal tracker modules.

Handlers live on the root logger and are installed once by
``goaltracker.utils.logging_config.setup_logging``; module loggers only carry
a level and hand their records up to the root.
"""

import logging
import os


def get_logger(name: str) -> logging.Logger:
    """Get a module logger at the level named by ``LOG_LEVEL``."""
    logger = logging.getLogger(name)
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))
    return logger
