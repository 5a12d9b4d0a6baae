"""UnitOfWork - transaction boundary over the record store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError

from registrar.store.exceptions import RecordStoreError, UnitOfWorkClosedError
from registrar.store.repositories import (
    CourseStore,
    EnrollmentStore,
    ScheduleStore,
    StudentStore,
    SubjectStore,
    WaitlistStore,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.orm import Session

    from registrar.cancellation import CancellationToken
    from registrar.store.database import Database

logger = logging.getLogger(__name__)


class UnitOfWork:
    """One session, one transaction.

    Use as a context manager. Leaving the block without ``commit()`` (or by
    an exception) rolls back every staged change.

    Example:
        with UnitOfWork(database) as uow:
            uow.enrollments.add(enrollment)
            uow.commit()
    """

    def __init__(self, database: Database, cancel: CancellationToken | None = None) -> None:
        """Initialize the unit of work.

        Args:
            database: Database to open the session on.
            cancel: Optional token checked before every store call and
                before commit.
        """
        self._database = database
        self._cancel = cancel
        self._session: Session | None = None
        self._rows_flushed = 0

    def __enter__(self) -> UnitOfWork:
        session = self._database.get_session()
        event.listen(session, "after_flush", self._count_flushed_rows)
        self._session = session
        self._rows_flushed = 0

        self.subjects = SubjectStore(session, self._cancel)
        self.courses = CourseStore(session, self._cancel)
        self.schedules = ScheduleStore(session, self._cancel)
        self.students = StudentStore(session, self._cancel)
        self.enrollments = EnrollmentStore(session, self._cancel)
        self.waitlist = WaitlistStore(session, self._cancel)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self._require_session()
        try:
            if exc_type is not None and session.in_transaction():
                logger.debug("Rolling back unit of work after %s", exc_type.__name__)
                session.rollback()
        finally:
            # close() discards an uncommitted transaction without expiring loaded instances
            session.close()
            self._session = None

    @property
    def session(self) -> Session:
        """The underlying SQLAlchemy session."""
        return self._require_session()

    def commit(self) -> int:
        """Flush and commit staged changes.

        Returns:
            Number of rows inserted, updated or deleted.

        Raises:
            OperationCancelledError: If the token was cancelled; nothing is
                committed.
            RecordStoreError: If the database rejects the changes.
        """
        session = self._require_session()
        if self._cancel is not None:
            self._cancel.raise_if_cancelled()
        try:
            session.flush()
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise RecordStoreError(f"Commit rejected by database: {e.orig}") from e
        rows, self._rows_flushed = self._rows_flushed, 0
        return rows

    def _count_flushed_rows(self, session: Session, _flush_context: object) -> None:
        # new/dirty/deleted still hold the pre-flush state here
        modified = sum(1 for obj in session.dirty if session.is_modified(obj))
        self._rows_flushed += len(session.new) + len(session.deleted) + modified

    def _require_session(self) -> Session:
        if self._session is None:
            raise UnitOfWorkClosedError("UnitOfWork used outside of its 'with' block")
        return self._session
