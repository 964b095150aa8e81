"""Logging setup for the ``kprint`` logger tree.

Every module logs through ``logging.getLogger(__name__)``, so all of
them hang below the ``kprint`` logger configured here:

    2026-10-19 14:05:30 [INFO    ] [MainThread] kprint.application.process_queue - Batch done: ...

Console output is always on.  When a log directory is given, a rotating
log file and an errors-only file are added next to it.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "kprint"
LOG_FORMAT = "%(asctime)s [%(levelname)-8s] [%(threadName)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5


def setup_logging(
    log_level: int | str = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Configure the ``kprint`` logger; safe to call more than once."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{ROOT_LOGGER}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            filename=log_dir / f"{ROOT_LOGGER}_error.log",
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        logger.addHandler(error_handler)

        logger.debug("File logging enabled: %s", app_log_file)

    return logger
