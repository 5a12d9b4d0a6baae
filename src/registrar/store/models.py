"""SQLAlchemy models for the record store."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from datetime import time as time_of_day  # noqa: TC003 - used at runtime for SQLAlchemy
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

from registrar.exceptions import InvalidScheduleError


class EnrollmentStatus(StrEnum):
    """Enrollment status enum."""

    ENROLLED = "enrolled"
    WAITLISTED = "waitlisted"


class DayOfWeek(StrEnum):
    """Day-of-week enum for schedules."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current UTC time."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Subject(Base):
    """Subject model - an academic course definition."""

    __tablename__ = "subjects"

    code: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_credits: Mapped[int] = mapped_column(Integer, nullable=False)
    prerequisite_code: Mapped[str | None] = mapped_column(
        String(50), ForeignKey("subjects.code"), nullable=True
    )

    def __init__(
        self,
        code: str,
        name: str | None = None,
        description: str | None = None,
        default_credits: int = 0,
        prerequisite_code: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.code = code
        self.name = name
        self.description = description
        self.default_credits = default_credits
        self.prerequisite_code = prerequisite_code

    def __repr__(self) -> str:
        return f"<Subject(code={self.code!r}, prerequisite_code={self.prerequisite_code!r})>"


class Course(Base):
    """Course model - an enrollable section of a subject."""

    __tablename__ = "courses"

    code: Mapped[str] = mapped_column(String(50), primary_key=True)
    subject_code: Mapped[str] = mapped_column(
        String(50), ForeignKey("subjects.code"), nullable=False
    )
    max_enrollment: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Relationships
    subject: Mapped[Subject] = relationship("Subject")

    def __init__(
        self,
        code: str,
        subject_code: str,
        max_enrollment: int | None = None,
        created_at: datetime | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.code = code
        self.subject_code = subject_code
        self.max_enrollment = max_enrollment
        self.created_at = created_at if created_at is not None else utcnow()

    def __repr__(self) -> str:
        return (
            f"<Course(code={self.code!r}, subject_code={self.subject_code!r}, "
            f"max_enrollment={self.max_enrollment!r})>"
        )


class Schedule(Base):
    """Schedule model - a weekly time slot for a course and/or room."""

    __tablename__ = "schedules"
    __table_args__ = (CheckConstraint("start_time < end_time", name="ck_schedule_time_range"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    room_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    course_code: Mapped[str | None] = mapped_column(
        String(50), ForeignKey("courses.code"), nullable=True, unique=True
    )
    day_of_week: Mapped[str] = mapped_column(String(10), nullable=False)
    start_time: Mapped[time_of_day] = mapped_column(Time, nullable=False)
    end_time: Mapped[time_of_day] = mapped_column(Time, nullable=False)

    def __init__(
        self,
        day_of_week: DayOfWeek | str,
        start_time: time_of_day,
        end_time: time_of_day,
        id: str | None = None,
        room_id: str | None = None,
        course_code: str | None = None,
        **kwargs: Any,
    ) -> None:
        if start_time >= end_time:
            raise InvalidScheduleError(
                f"Invalid time range: start {start_time:%H:%M} must be before end {end_time:%H:%M}"
            )
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.day_of_week = DayOfWeek(day_of_week).value
        self.start_time = start_time
        self.end_time = end_time
        self.room_id = room_id
        self.course_code = course_code

    @property
    def day(self) -> DayOfWeek:
        """Get day_of_week as DayOfWeek enum."""
        return DayOfWeek(self.day_of_week)

    def __repr__(self) -> str:
        return (
            f"<Schedule(id={self.id!r}, course_code={self.course_code!r}, "
            f"day={self.day_of_week!r}, {self.start_time:%H:%M}-{self.end_time:%H:%M})>"
        )


class Student(Base):
    """Student model - a user who can enroll in courses."""

    __tablename__ = "students"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    student_code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __init__(self, user_id: str, student_code: str, full_name: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.user_id = user_id
        self.student_code = student_code
        self.full_name = full_name

    def __repr__(self) -> str:
        return f"<Student(user_id={self.user_id!r}, student_code={self.student_code!r})>"


class Enrollment(Base):
    """Enrollment model - a student's seat or waitlist position in a course."""

    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("student_id", "course_code", name="uq_enrollment_pair"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("students.user_id"), nullable=False
    )
    course_code: Mapped[str] = mapped_column(
        String(50), ForeignKey("courses.code"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    enrolled_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    is_passed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    course: Mapped[Course] = relationship("Course")

    def __init__(
        self,
        student_id: str,
        course_code: str,
        status: EnrollmentStatus | str = EnrollmentStatus.ENROLLED,
        enrolled_at: datetime | None = None,
        is_passed: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.course_code = course_code
        self.status = EnrollmentStatus(status).value
        self.enrolled_at = enrolled_at if enrolled_at is not None else utcnow()
        self.is_passed = is_passed

    @property
    def enrollment_status(self) -> EnrollmentStatus:
        """Get status as EnrollmentStatus enum."""
        return EnrollmentStatus(self.status)

    @enrollment_status.setter
    def enrollment_status(self, value: EnrollmentStatus) -> None:
        """Set status from EnrollmentStatus enum."""
        self.status = value.value

    def __repr__(self) -> str:
        return (
            f"<Enrollment(student_id={self.student_id!r}, course_code={self.course_code!r}, "
            f"status={self.status!r})>"
        )


class WaitlistEntry(Base):
    """Waitlist entry model - FIFO marker for a waitlisted enrollment."""

    __tablename__ = "waitlist_entries"
    __table_args__ = (UniqueConstraint("student_id", "course_code", name="uq_waitlist_pair"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(String(36), nullable=False)
    course_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    enrollment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("enrollments.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Relationships
    enrollment: Mapped[Enrollment] = relationship("Enrollment")

    def __init__(
        self,
        enrollment: Enrollment,
        created_at: datetime | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.enrollment = enrollment
        self.student_id = enrollment.student_id
        self.course_code = enrollment.course_code
        self.created_at = created_at if created_at is not None else utcnow()

    def __repr__(self) -> str:
        return (
            f"<WaitlistEntry(student_id={self.student_id!r}, course_code={self.course_code!r}, "
            f"created_at={self.created_at!r})>"
        )
