"""Logging configuration for the eksbootstrap package."""
import logging
import sys

from .config import Config

NOISY_LOGGERS = ("botocore", "boto3", "urllib3")


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Set up a logger with the specified name and log level.

    Args:
        name: The name of the logger
        level: The logging level (default: logging.INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Don't add handlers if they're already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(Config.LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(handler)
    else:
        for handler in logger.handlers:
            handler.setLevel(level)

    return logger


def configure_logging(debug: bool = False) -> logging.Logger:
    """Configure the package logger for a CLI run.

    Args:
        debug: Enable debug logging if True

    Returns:
        The root ``eksbootstrap`` logger
    """
    if debug:
        level = logging.DEBUG
    else:
        level = logging.getLevelName(Config.LOG_LEVEL)
        if not isinstance(level, int):
            level = logging.INFO

    logger = setup_logger("eksbootstrap", level)

    # Disable debug logging for noisy libraries
    if not debug:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return logger
