"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from registrar.catalog import CatalogService
from registrar.config import DEFAULT_BUSY_TIMEOUT, DEFAULT_DB_PATH
from registrar.enrollment import AdmissionEngine
from registrar.store import Database

# Global Database instance (initialized on app startup)
_database: Database | None = None


def init_database(
    db_path: str = DEFAULT_DB_PATH, busy_timeout: float = DEFAULT_BUSY_TIMEOUT
) -> Database:
    """Initialize the global Database instance and create tables."""
    global _database  # noqa: PLW0603
    _database = Database(db_path, busy_timeout=busy_timeout)
    _database.create_tables()
    return _database


def close_database() -> None:
    """Close the global Database instance."""
    global _database  # noqa: PLW0603
    if _database is not None:
        _database.close()
        _database = None


def get_database() -> Generator[Database, None, None]:
    """Dependency that provides the Database instance."""
    if _database is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    yield _database


# Type alias for dependency injection
DatabaseDep = Annotated[Database, Depends(get_database)]

# Global AdmissionEngine instance (initialized on app startup)
_engine: AdmissionEngine | None = None


def init_engine(engine: AdmissionEngine) -> None:
    """Initialize the global AdmissionEngine instance."""
    global _engine  # noqa: PLW0603
    _engine = engine


def close_engine() -> None:
    """Close the global AdmissionEngine instance."""
    global _engine  # noqa: PLW0603
    _engine = None


def get_engine() -> Generator[AdmissionEngine, None, None]:
    """Dependency that provides the AdmissionEngine instance."""
    if _engine is None:
        raise RuntimeError("AdmissionEngine not initialized. Call init_engine() first.")
    yield _engine


# Type alias for dependency injection
EngineDep = Annotated[AdmissionEngine, Depends(get_engine)]

# Global CatalogService instance (initialized on app startup)
_catalog: CatalogService | None = None


def init_catalog(catalog: CatalogService) -> None:
    """Initialize the global CatalogService instance."""
    global _catalog  # noqa: PLW0603
    _catalog = catalog


def close_catalog() -> None:
    """Close the global CatalogService instance."""
    global _catalog  # noqa: PLW0603
    _catalog = None


def get_catalog() -> Generator[CatalogService, None, None]:
    """Dependency that provides the CatalogService instance."""
    if _catalog is None:
        raise RuntimeError("CatalogService not initialized. Call init_catalog() first.")
    yield _catalog


# Type alias for dependency injection
CatalogDep = Annotated[CatalogService, Depends(get_catalog)]
