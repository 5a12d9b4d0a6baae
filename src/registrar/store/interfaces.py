"""Capability-scoped store interfaces used by the validators and engine."""

from __future__ import annotations

from collections.abc import Sequence  # noqa: TC003
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from registrar.store.models import Course, Enrollment, Schedule, Subject, WaitlistEntry


class SubjectLookup(Protocol):
    """Read access to subjects."""

    def get(self, code: str) -> Subject | None:
        """Get a subject by code."""
        ...

    def exists(self, code: str) -> bool:
        """Check whether a subject exists."""
        ...


class CourseLookup(Protocol):
    """Read access to courses and their seat counts."""

    def get(self, code: str) -> Course | None:
        """Get a course by code."""
        ...

    def count_enrolled(self, code: str) -> int:
        """Count Enrolled-status enrollments for a course."""
        ...


class ScheduleLookup(Protocol):
    """Read access to schedules."""

    def get_by_course(self, code: str) -> Schedule | None:
        """Get the schedule attached to a course."""
        ...

    def get_by_room(self, room_id: str) -> Sequence[Schedule]:
        """List schedules booked in a room."""
        ...


class EnrollmentLookup(Protocol):
    """Read/write access to enrollments."""

    def get(self, student_id: str, course_code: str) -> Enrollment | None:
        """Get the enrollment for a (student, course) pair."""
        ...

    def get_by_student(self, student_id: str) -> Sequence[Enrollment]:
        """List a student's enrollments in a deterministic order."""
        ...

    def add(self, enrollment: Enrollment) -> None:
        """Stage a new enrollment."""
        ...

    def delete(self, enrollment: Enrollment) -> None:
        """Stage an enrollment for deletion."""
        ...

    def find(self, *criteria: Any) -> Sequence[Enrollment]:
        """List enrollments matching SQL criteria (may reference Course columns)."""
        ...


class WaitlistQueue(Protocol):
    """Read/write access to waitlist entries."""

    def get_by_course(self, code: str) -> Sequence[WaitlistEntry]:
        """List a course's entries ordered by creation time ascending."""
        ...

    def add(self, entry: WaitlistEntry) -> None:
        """Stage a new waitlist entry."""
        ...

    def delete(self, entry: WaitlistEntry) -> None:
        """Stage a waitlist entry for deletion."""
        ...
