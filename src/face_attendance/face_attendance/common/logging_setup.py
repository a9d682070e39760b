"""Logging configuration for the attendance service."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_TAG = "_face_attendance_handler"


def setup_logging(
    log_level: str = "INFO",
    *,
    log_dir: Optional[str] = None,
    max_log_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Install console (and optionally rotating file) handlers on the package logger.

    Calling this more than once replaces the handlers installed previously, so
    the Flask factory can run repeatedly in tests without duplicating output.
    """

    level = getattr(logging, str(log_level).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    logger = logging.getLogger("face_attendance")
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    setattr(console_handler, _HANDLER_TAG, True)
    logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            path / "face_attendance.log",
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_TAG, True)
        logger.addHandler(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            path / "errors.log",
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        setattr(error_handler, _HANDLER_TAG, True)
        logger.addHandler(error_handler)

    return logger
