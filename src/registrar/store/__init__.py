"""Record store - SQLite persistence for subjects, courses, schedules and enrollments."""

from registrar.store.database import Database
from registrar.store.exceptions import RecordStoreError, UnitOfWorkClosedError
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
from registrar.store.unit_of_work import UnitOfWork

__all__ = [
    "Course",
    "Database",
    "DayOfWeek",
    "Enrollment",
    "EnrollmentStatus",
    "RecordStoreError",
    "Schedule",
    "Student",
    "Subject",
    "UnitOfWork",
    "UnitOfWorkClosedError",
    "WaitlistEntry",
]
