"""Shared pytest fixtures and configuration."""

from datetime import UTC, datetime, timedelta

import pytest

from registrar.store import Database


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def database():
    """Create an in-memory database with tables."""
    db = Database(":memory:")
    db.create_tables()
    yield db
    db.close()


class TickingClock:
    """Clock that advances one second per call, so FIFO order is deterministic."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 5, 8, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock() -> TickingClock:
    """A deterministic clock for enrollment timestamps."""
    return TickingClock()
