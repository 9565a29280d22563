"""
Logging setup.

Console output goes through rich; a combined and an error-only rotating
file log are written under the log directory.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler

LOGGER_NAME = "badge_gen"
MAX_LOG_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5
FILE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(
    level: Optional[Union[int, str]] = None,
    log_dir: Optional[str] = "logs"
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Console level, defaults to ``LOG_LEVEL`` or INFO
        log_dir: Directory for file logs; None disables file logging

    Returns:
        The configured ``badge_gen`` logger
    """
    level = level or os.environ.get("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = RichHandler(show_path=False, log_time_format="%H:%M:%S")
    console.setLevel(level)
    logger.addHandler(console)

    if log_dir is not None:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        formatter = logging.Formatter(FILE_FORMAT)

        combined = RotatingFileHandler(
            Path(log_dir) / "badge-gen.log", maxBytes=MAX_LOG_BYTES,
            backupCount=BACKUP_COUNT, encoding="utf-8"
        )
        combined.setLevel(logging.DEBUG)
        combined.setFormatter(formatter)
        logger.addHandler(combined)

        errors = RotatingFileHandler(
            Path(log_dir) / "badge-gen-error.log", maxBytes=MAX_LOG_BYTES,
            backupCount=BACKUP_COUNT, encoding="utf-8"
        )
        errors.setLevel(logging.ERROR)
        errors.setFormatter(formatter)
        logger.addHandler(errors)

    return logger
