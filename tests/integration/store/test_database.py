"""Integration tests for the record store database."""

import tempfile
from pathlib import Path

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError

from registrar.store import Database, Student, Subject, UnitOfWork


@pytest.fixture
def temp_db_path() -> str:
    """Create a temporary database path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        return f.name


@pytest.fixture
def file_database(temp_db_path: str):
    """Create a file database instance with tables."""
    db = Database(temp_db_path)
    db.create_tables()
    yield db
    db.close()
    # Cleanup
    Path(temp_db_path).unlink(missing_ok=True)
    Path(f"{temp_db_path}-wal").unlink(missing_ok=True)
    Path(f"{temp_db_path}-shm").unlink(missing_ok=True)


@pytest.mark.integration
class TestDatabaseSetup:
    """Tests for database setup."""

    def test_creates_file_in_nested_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "data" / "registrar.db"
            db = Database(str(path))
            db.create_tables()

            assert path.exists()
            db.close()

    def test_creates_tables(self, file_database: Database) -> None:
        tables = set(inspect(file_database.engine).get_table_names())

        assert {
            "subjects",
            "courses",
            "schedules",
            "students",
            "enrollments",
            "waitlist_entries",
        } <= tables

    def test_wal_mode(self, file_database: Database) -> None:
        assert file_database.is_wal_mode()

    def test_foreign_keys_enabled(self, file_database: Database) -> None:
        with file_database.engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_data_persists_across_instances(self, temp_db_path: str, file_database: Database) -> None:
        with UnitOfWork(file_database) as uow:
            uow.subjects.add(Subject("CS101", name="Intro"))
            uow.commit()

        other = Database(temp_db_path)
        with UnitOfWork(other) as uow:
            assert uow.subjects.get("CS101").name == "Intro"
        other.close()


@pytest.mark.integration
class TestWriteLock:
    """Units of work take the write lock when they begin."""

    def test_second_writer_waits_then_times_out(
        self, temp_db_path: str, file_database: Database
    ) -> None:
        impatient = Database(temp_db_path, busy_timeout=0.1)

        with UnitOfWork(file_database) as holder:
            holder.students.get("s1")  # begins the transaction

            with pytest.raises(OperationalError), UnitOfWork(impatient) as uow:
                uow.students.add(Student("s2", "ST-002", "Alan Turing"))
                uow.commit()

        impatient.close()

    def test_lock_released_after_commit(self, temp_db_path: str, file_database: Database) -> None:
        impatient = Database(temp_db_path, busy_timeout=0.1)

        with UnitOfWork(file_database) as uow:
            uow.students.add(Student("s1", "ST-001", "Ada Lovelace"))
            uow.commit()

        with UnitOfWork(impatient) as uow:
            uow.students.add(Student("s2", "ST-002", "Alan Turing"))
            assert uow.commit() == 1

        impatient.close()
