"""Logging configuration for client events."""
import logging
from logging.handlers import RotatingFileHandler

from .config import LOG_FILE


def configure_logging() -> logging.Logger:
    """Configure application-wide logging to a rotating file handler."""
    logger = logging.getLogger("chat_messenger")
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        handler = RotatingFileHandler(LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, delay=True)
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
