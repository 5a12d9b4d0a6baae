"""Schedule conflict checks for rooms and students."""

from __future__ import annotations

from typing import TYPE_CHECKING

from registrar.store.models import EnrollmentStatus
from registrar.validation.intervals import schedules_overlap
from registrar.validation.models import StudentScheduleConflict

if TYPE_CHECKING:
    from collections.abc import Iterable

    from registrar.store.interfaces import EnrollmentLookup, ScheduleLookup
    from registrar.store.models import Schedule


class ScheduleConflictChecker:
    """Finds overlapping schedules. Read-only."""

    def __init__(self, schedules: ScheduleLookup, enrollments: EnrollmentLookup) -> None:
        """Initialize the checker.

        Args:
            schedules: Schedule lookup.
            enrollments: Enrollment lookup for a student's current courses.
        """
        self._schedules = schedules
        self._enrollments = enrollments

    @staticmethod
    def room_conflict(candidate: Schedule, existing: Iterable[Schedule]) -> Schedule | None:
        """Find the first schedule that double-books the candidate's room.

        Args:
            candidate: Schedule being created or updated.
            existing: Schedules to compare against; entries in other rooms
                and the candidate itself are ignored.

        Returns:
            The first conflicting schedule, or None.
        """
        for schedule in existing:
            if schedule.id == candidate.id or schedule.room_id != candidate.room_id:
                continue
            if schedules_overlap(candidate, schedule):
                return schedule
        return None

    def find_room_conflict(self, candidate: Schedule) -> Schedule | None:
        """Check the candidate against every schedule booked in its room.

        A schedule without a room cannot double-book anything.
        """
        if not candidate.room_id:
            return None
        return self.room_conflict(candidate, self._schedules.get_by_room(candidate.room_id))

    def student_conflict(
        self, student_id: str, candidate_course_code: str
    ) -> StudentScheduleConflict | None:
        """Find an Enrolled course of the student that overlaps the candidate course.

        Waitlisted enrollments hold no seat and are not considered. Courses
        are scanned in the order the enrollment store returns them; the first
        conflict wins.

        Args:
            student_id: The student's user ID.
            candidate_course_code: Course the student wants a seat in.

        Returns:
            The conflicting course and its schedule, or None.
        """
        candidate = self._schedules.get_by_course(candidate_course_code)
        if candidate is None:
            return None

        for enrollment in self._enrollments.get_by_student(student_id):
            if enrollment.status != EnrollmentStatus.ENROLLED.value:
                continue
            if enrollment.course_code == candidate_course_code:
                continue
            existing = self._schedules.get_by_course(enrollment.course_code)
            if existing is not None and schedules_overlap(existing, candidate):
                return StudentScheduleConflict(course_code=enrollment.course_code, schedule=existing)

        return None
