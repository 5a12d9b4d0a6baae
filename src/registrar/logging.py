"""Centralized logging configuration for Registrar.

Every module logs through ``logging.getLogger(__name__)``, so all records land
under the ``registrar`` logger that ``setup_logging`` configures.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from registrar.config import Settings

ROOT_LOGGER = "registrar"
LOG_FILE = "registrar.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    settings: Settings,
    console: bool = True,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """Configure the registrar logger from settings.

    Enrollment decisions, promotions and rejected API requests are written to
    ``<log_dir>/registrar.log`` (rotated) when ``settings.log_dir`` is set,
    and to the console when ``console`` is true. Calling it again replaces
    the previous handlers.

    Args:
        settings: Supplies ``log_dir`` and ``log_level`` (default INFO).
        console: Whether to also log to stderr.
        max_bytes: Size at which the log file rotates.
        backup_count: Number of rotated files to keep.

    Returns:
        The root registrar logger.
    """
    level_name = (settings.log_level or DEFAULT_LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = []

    log_path = None
    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / LOG_FILE
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )

    if console:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(
        "Registrar logging initialized (level=%s, file=%s, db=%s)",
        level_name,
        log_path,
        settings.db_path,
    )
    return logger
