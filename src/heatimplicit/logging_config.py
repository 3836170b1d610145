"""
Logging Configuration
Sets up the 'heatimplicit' logger for command-line runs.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "heatimplicit"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def reset_handlers(logger: logging.Logger) -> None:
    """Detach and close every handler of `logger`, releasing open log files."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    The console handler is attached first, so a log file that cannot be opened
    is still reported on the console.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to also write the log to, truncated on open.

    Raises:
        OSError: If `log_file` cannot be opened for writing.

    Returns:
        The configured 'heatimplicit' logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    reset_handlers(logger)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    _attach(logger, logging.StreamHandler(sys.stdout), level, formatter)
    if log_file:
        _attach(logger, logging.FileHandler(log_file, mode='w', encoding='utf-8'), level, formatter)

    logger.debug(f"Logging initialized at level {logging.getLevelName(level)}.")
    return logger
