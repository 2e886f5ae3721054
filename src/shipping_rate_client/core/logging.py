import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "shipping_rate_client"


def configure_logging(
    level: Union[int, str] = logging.INFO, logger_name: Optional[str] = None
) -> logging.Logger:
    """
    Configure and return a logger. Reuses existing handlers to avoid duplicates.

    Module loggers under the package only get a level; records propagate up to
    the package logger, which owns the single stdout handler.
    """
    logger = logging.getLogger(logger_name)
    if logger_name and logger_name.startswith(ROOT_LOGGER_NAME + "."):
        _package_logger(level)
        return logger
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def _package_logger(level: Union[int, str]) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not logger.handlers:
        configure_logging(level=level, logger_name=ROOT_LOGGER_NAME)
    return logger


def set_level(level: Union[int, str]) -> None:
    """Change the package-wide log level (used by the CLI after settings load)."""
    _package_logger(level).setLevel(level)
