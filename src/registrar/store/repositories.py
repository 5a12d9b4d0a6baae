"""SQLAlchemy implementations of the store capabilities.

Each store wraps the session owned by a UnitOfWork and checks the unit's
cancellation token before every database call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import case, func, select

from registrar.store.models import (
    Course,
    DayOfWeek,
    Enrollment,
    EnrollmentStatus,
    Schedule,
    Student,
    Subject,
    WaitlistEntry,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from registrar.cancellation import CancellationToken

_WEEKDAY_ORDER = case(
    {day.value: index for index, day in enumerate(DayOfWeek)},
    value=Schedule.day_of_week,
)


class _SessionStore:
    """Shared plumbing for session-backed stores."""

    def __init__(self, session: Session, cancel: CancellationToken | None = None) -> None:
        self._session = session
        self._cancel = cancel

    def _checkpoint(self) -> None:
        if self._cancel is not None:
            self._cancel.raise_if_cancelled()


class SubjectStore(_SessionStore):
    """Subject records."""

    def get(self, code: str) -> Subject | None:
        self._checkpoint()
        return self._session.get(Subject, code)

    def exists(self, code: str) -> bool:
        self._checkpoint()
        stmt = select(func.count()).select_from(Subject).where(Subject.code == code)
        return bool(self._session.execute(stmt).scalar_one())

    def list_all(self) -> list[Subject]:
        """List all subjects, ordered by code."""
        self._checkpoint()
        stmt = select(Subject).order_by(Subject.code)
        return list(self._session.execute(stmt).scalars().all())

    def add(self, subject: Subject) -> None:
        self._checkpoint()
        self._session.add(subject)


class CourseStore(_SessionStore):
    """Course records."""

    def get(self, code: str) -> Course | None:
        self._checkpoint()
        return self._session.get(Course, code)

    def count_enrolled(self, code: str) -> int:
        self._checkpoint()
        stmt = (
            select(func.count())
            .select_from(Enrollment)
            .where(
                Enrollment.course_code == code,
                Enrollment.status == EnrollmentStatus.ENROLLED.value,
            )
        )
        return int(self._session.execute(stmt).scalar_one())

    def list_by_subject(self, subject_code: str) -> list[Course]:
        """List courses offering a subject, ordered by code."""
        self._checkpoint()
        stmt = select(Course).where(Course.subject_code == subject_code).order_by(Course.code)
        return list(self._session.execute(stmt).scalars().all())

    def add(self, course: Course) -> None:
        self._checkpoint()
        self._session.add(course)


class ScheduleStore(_SessionStore):
    """Schedule records."""

    def get(self, schedule_id: str) -> Schedule | None:
        self._checkpoint()
        return self._session.get(Schedule, schedule_id)

    def get_by_course(self, code: str) -> Schedule | None:
        self._checkpoint()
        stmt = select(Schedule).where(Schedule.course_code == code)
        return self._session.execute(stmt).scalar_one_or_none()

    def get_by_room(self, room_id: str) -> list[Schedule]:
        self._checkpoint()
        stmt = (
            select(Schedule)
            .where(Schedule.room_id == room_id)
            .order_by(_WEEKDAY_ORDER, Schedule.start_time, Schedule.id)
        )
        return list(self._session.execute(stmt).scalars().all())

    def add(self, schedule: Schedule) -> None:
        self._checkpoint()
        self._session.add(schedule)

    def delete(self, schedule: Schedule) -> None:
        self._checkpoint()
        self._session.delete(schedule)


class StudentStore(_SessionStore):
    """Student records."""

    def get(self, user_id: str) -> Student | None:
        self._checkpoint()
        return self._session.get(Student, user_id)

    def get_by_code(self, student_code: str) -> Student | None:
        self._checkpoint()
        stmt = select(Student).where(Student.student_code == student_code)
        return self._session.execute(stmt).scalar_one_or_none()

    def add(self, student: Student) -> None:
        self._checkpoint()
        self._session.add(student)


class EnrollmentStore(_SessionStore):
    """Enrollment records."""

    def get(self, student_id: str, course_code: str) -> Enrollment | None:
        self._checkpoint()
        stmt = select(Enrollment).where(
            Enrollment.student_id == student_id,
            Enrollment.course_code == course_code,
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def get_by_student(self, student_id: str) -> list[Enrollment]:
        self._checkpoint()
        stmt = select(Enrollment).where(Enrollment.student_id == student_id).order_by(Enrollment.id)
        return list(self._session.execute(stmt).scalars().all())

    def find(self, *criteria: Any) -> list[Enrollment]:
        self._checkpoint()
        stmt = select(Enrollment).join(Enrollment.course).where(*criteria).order_by(Enrollment.id)
        return list(self._session.execute(stmt).scalars().all())

    def add(self, enrollment: Enrollment) -> None:
        self._checkpoint()
        self._session.add(enrollment)

    def delete(self, enrollment: Enrollment) -> None:
        self._checkpoint()
        self._session.delete(enrollment)


class WaitlistStore(_SessionStore):
    """Waitlist entries."""

    def get_by_course(self, code: str) -> list[WaitlistEntry]:
        self._checkpoint()
        stmt = (
            select(WaitlistEntry)
            .where(WaitlistEntry.course_code == code)
            .order_by(WaitlistEntry.created_at, WaitlistEntry.id)
        )
        return list(self._session.execute(stmt).scalars().all())

    def get_by_student_and_course(self, student_id: str, course_code: str) -> WaitlistEntry | None:
        self._checkpoint()
        stmt = select(WaitlistEntry).where(
            WaitlistEntry.student_id == student_id,
            WaitlistEntry.course_code == course_code,
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def add(self, entry: WaitlistEntry) -> None:
        self._checkpoint()
        self._session.add(entry)

    def delete(self, entry: WaitlistEntry) -> None:
        self._checkpoint()
        self._session.delete(entry)
