import logging
import sys

from yieldmaster.config import LOG_FORMAT, LOG_LEVEL


def configure_logging(level=None):
    """
    Configures the root logger for the application.
    """
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger with the specified name.
    """
    return logging.getLogger(name)
