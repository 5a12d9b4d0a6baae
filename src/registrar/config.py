"""Configuration loading for Registrar."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_DB_PATH = "registrar.db"
DEFAULT_BUSY_TIMEOUT = 5.0


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass
class Settings:
    """Runtime settings.

    Attributes:
        db_path: Path to the SQLite database file, or ":memory:".
        log_dir: Directory for the rotating log file (None = console only).
        log_level: Log level name (None = INFO).
        busy_timeout: Seconds to wait for the database write lock before
            giving up on a unit of work.
    """

    db_path: str = DEFAULT_DB_PATH
    log_dir: str | None = None
    log_level: str | None = None
    busy_timeout: float = DEFAULT_BUSY_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Create settings from REGISTRAR_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Parsed settings.

        Raises:
            ConfigError: If a value cannot be parsed.
        """
        if environ is None:
            environ = os.environ

        raw_timeout = environ.get("REGISTRAR_BUSY_TIMEOUT")
        busy_timeout = DEFAULT_BUSY_TIMEOUT
        if raw_timeout is not None:
            try:
                busy_timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigError(
                    f"REGISTRAR_BUSY_TIMEOUT must be a number, got '{raw_timeout}'"
                ) from e
            if busy_timeout < 0:
                raise ConfigError("REGISTRAR_BUSY_TIMEOUT must not be negative")

        return cls(
            db_path=environ.get("REGISTRAR_DB_PATH", DEFAULT_DB_PATH),
            log_dir=environ.get("REGISTRAR_LOG_DIR"),
            log_level=environ.get("REGISTRAR_LOG_LEVEL"),
            busy_timeout=busy_timeout,
        )
