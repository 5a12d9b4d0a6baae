"""Domain exceptions for Registrar.

Every exception carries an ``ErrorKind`` and the codes a client needs to explain
the rejection to a student.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datetime import time


class ErrorKind(StrEnum):
    """Kinds of rejection surfaced to callers."""

    NOT_FOUND = "not_found"
    ALREADY_ENROLLED = "already_enrolled"
    PREREQUISITE_NOT_MET = "prerequisite_not_met"
    SCHEDULE_CONFLICT = "schedule_conflict"
    CIRCULAR_PREREQUISITE = "circular_prerequisite"
    ALREADY_EXISTS = "already_exists"
    INVALID = "invalid"
    CANCELLED = "cancelled"


class RegistrarError(Exception):
    """Base exception for Registrar errors."""

    kind: ErrorKind = ErrorKind.INVALID

    def to_detail(self) -> dict[str, Any]:
        """Structured detail for API responses."""
        return {}


# --- Not found ---


class NotFoundError(RegistrarError):
    """Referenced record does not exist."""

    kind = ErrorKind.NOT_FOUND


class StudentNotFoundError(NotFoundError):
    """Student with given user ID does not exist."""

    def __init__(self, student_id: str) -> None:
        super().__init__(f"Student with id '{student_id}' not found")
        self.student_id = student_id

    def to_detail(self) -> dict[str, Any]:
        return {"student_id": self.student_id}


class CourseNotFoundError(NotFoundError):
    """Course with given code does not exist."""

    def __init__(self, course_code: str) -> None:
        super().__init__(f"Course with code '{course_code}' not found")
        self.course_code = course_code

    def to_detail(self) -> dict[str, Any]:
        return {"course_code": self.course_code}


class SubjectNotFoundError(NotFoundError):
    """Subject with given code does not exist."""

    def __init__(self, subject_code: str) -> None:
        super().__init__(f"Subject with code '{subject_code}' not found")
        self.subject_code = subject_code

    def to_detail(self) -> dict[str, Any]:
        return {"subject_code": self.subject_code}


class EnrollmentNotFoundError(NotFoundError):
    """No enrollment exists for the (student, course) pair."""

    def __init__(self, student_id: str, course_code: str) -> None:
        super().__init__(f"No enrollment found for student '{student_id}' in '{course_code}'")
        self.student_id = student_id
        self.course_code = course_code

    def to_detail(self) -> dict[str, Any]:
        return {"student_id": self.student_id, "course_code": self.course_code}


class ScheduleNotFoundError(NotFoundError):
    """Schedule with given ID does not exist."""

    def __init__(self, schedule_id: str) -> None:
        super().__init__(f"Schedule with id '{schedule_id}' not found")
        self.schedule_id = schedule_id

    def to_detail(self) -> dict[str, Any]:
        return {"schedule_id": self.schedule_id}


# --- Enrollment rejections ---


class AlreadyEnrolledError(RegistrarError):
    """Student already holds an enrollment (in any status) for the course."""

    kind = ErrorKind.ALREADY_ENROLLED

    def __init__(self, student_id: str, course_code: str, status: str) -> None:
        super().__init__(f"Student '{student_id}' is already {status} in course '{course_code}'")
        self.student_id = student_id
        self.course_code = course_code
        self.status = status

    def to_detail(self) -> dict[str, Any]:
        return {
            "student_id": self.student_id,
            "course_code": self.course_code,
            "status": self.status,
        }


class PrerequisiteNotMetError(RegistrarError):
    """Student has not completed the subject's prerequisite."""

    kind = ErrorKind.PREREQUISITE_NOT_MET

    def __init__(self, subject_code: str, prerequisite_code: str) -> None:
        super().__init__(
            f"Student must complete {prerequisite_code} before taking {subject_code}"
        )
        self.subject_code = subject_code
        self.prerequisite_code = prerequisite_code

    def to_detail(self) -> dict[str, Any]:
        return {"subject_code": self.subject_code, "prerequisite_code": self.prerequisite_code}


class ScheduleConflictError(RegistrarError):
    """Requested schedule overlaps an existing one."""

    kind = ErrorKind.SCHEDULE_CONFLICT

    def __init__(
        self,
        course_code: str | None,
        day_of_week: str,
        start_time: time,
        end_time: time,
        room_id: str | None = None,
    ) -> None:
        where = f" in room {room_id}" if room_id else ""
        super().__init__(
            f"Schedule conflict with course '{course_code or 'unknown'}'{where} on {day_of_week} "
            f"from {start_time:%H:%M} to {end_time:%H:%M}"
        )
        self.course_code = course_code
        self.day_of_week = day_of_week
        self.start_time = start_time
        self.end_time = end_time
        self.room_id = room_id

    def to_detail(self) -> dict[str, Any]:
        return {
            "course_code": self.course_code,
            "day_of_week": self.day_of_week,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "room_id": self.room_id,
        }


# --- Catalog configuration ---


class CircularPrerequisiteError(RegistrarError):
    """Setting the prerequisite would create a cycle."""

    kind = ErrorKind.CIRCULAR_PREREQUISITE

    def __init__(self, subject_code: str, prerequisite_code: str) -> None:
        super().__init__(
            f"Setting '{prerequisite_code}' as prerequisite of '{subject_code}' "
            "would create a circular dependency"
        )
        self.subject_code = subject_code
        self.prerequisite_code = prerequisite_code

    def to_detail(self) -> dict[str, Any]:
        return {"subject_code": self.subject_code, "prerequisite_code": self.prerequisite_code}


class RecordExistsError(RegistrarError):
    """A record with the same key already exists."""

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} '{key}' already exists")
        self.entity = entity
        self.key = key

    def to_detail(self) -> dict[str, Any]:
        return {"entity": self.entity, "key": self.key}


class InvalidScheduleError(RegistrarError, ValueError):
    """Schedule time range is invalid."""

    kind = ErrorKind.INVALID


# --- Cancellation ---


class OperationCancelledError(RegistrarError):
    """Operation was cancelled before its transaction committed."""

    kind = ErrorKind.CANCELLED
