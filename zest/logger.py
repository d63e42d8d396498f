"""Logging setup for the ordering core."""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from zest.config import LOG_DIR, LOG_LEVEL

LOGGER_NAME = "zest"


def setup_logger(log_dir: str | Path | None = None) -> logging.Logger:
    """
    Configure the package logger.

    Console output plus one rotating file per day under ``log_dir``
    (``LOG_DIR`` when omitted). Calling it again returns the already
    configured logger without stacking handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(LOG_LEVEL)

    if logger.handlers:
        return logger

    directory = Path(log_dir or LOG_DIR)
    directory.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = TimedRotatingFileHandler(
        filename=directory / "zest.log",
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info("Logger initialized (daily rotation enabled)")
    return logger
