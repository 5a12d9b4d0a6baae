"""CatalogService - administration of subjects, courses, schedules and students."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from registrar.exceptions import (
    CircularPrerequisiteError,
    CourseNotFoundError,
    ErrorKind,
    InvalidScheduleError,
    RecordExistsError,
    ScheduleConflictError,
    ScheduleNotFoundError,
    StudentNotFoundError,
    SubjectNotFoundError,
)
from registrar.store import Course, DayOfWeek, Schedule, Student, Subject, UnitOfWork
from registrar.validation import PrerequisiteValidator, ScheduleConflictChecker

if TYPE_CHECKING:
    from datetime import time

    from registrar.cancellation import CancellationToken
    from registrar.store import Database

logger = logging.getLogger(__name__)


class CatalogService:
    """Catalog operations, one unit of work per call."""

    def __init__(self, database: Database) -> None:
        """Initialize the service.

        Args:
            database: Database holding the record store.
        """
        self._database = database

    # --- Subjects ---

    def create_subject(
        self,
        code: str,
        name: str | None = None,
        description: str | None = None,
        default_credits: int = 0,
        prerequisite_code: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> Subject:
        """Create a new subject.

        Raises:
            RecordExistsError: If a subject with this code exists.
            SubjectNotFoundError: If the prerequisite doesn't exist.
            CircularPrerequisiteError: If the prerequisite would close a cycle.
        """
        with UnitOfWork(self._database, cancel) as uow:
            if uow.subjects.exists(code):
                raise RecordExistsError("Subject", code)

            prereq = self._checked_prerequisite(uow, code, prerequisite_code)
            subject = Subject(
                code=code,
                name=name,
                description=description,
                default_credits=default_credits,
                prerequisite_code=prereq,
            )
            uow.subjects.add(subject)
            uow.commit()

        logger.info("Created subject %s (prerequisite: %s)", code, prereq)
        return subject

    def update_subject(
        self,
        code: str,
        name: str | None = None,
        description: str | None = None,
        default_credits: int | None = None,
        prerequisite_code: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> Subject:
        """Update a subject (partial update).

        Fields left as None are unchanged; an empty ``prerequisite_code``
        clears the prerequisite.

        Raises:
            SubjectNotFoundError: If the subject or new prerequisite doesn't exist.
            CircularPrerequisiteError: If the new prerequisite would close a cycle.
        """
        with UnitOfWork(self._database, cancel) as uow:
            subject = uow.subjects.get(code)
            if subject is None:
                raise SubjectNotFoundError(code)

            if name is not None:
                subject.name = name
            if description is not None:
                subject.description = description
            if default_credits is not None:
                subject.default_credits = default_credits
            if prerequisite_code is not None:
                subject.prerequisite_code = self._checked_prerequisite(
                    uow, code, prerequisite_code
                )
            uow.commit()

        logger.info("Updated subject %s", code)
        return subject

    def get_subject(self, code: str, cancel: CancellationToken | None = None) -> Subject:
        """Get a subject by code.

        Raises:
            SubjectNotFoundError: If the subject doesn't exist.
        """
        with UnitOfWork(self._database, cancel) as uow:
            subject = uow.subjects.get(code)
            if subject is None:
                raise SubjectNotFoundError(code)
            return subject

    def list_subjects(self, cancel: CancellationToken | None = None) -> list[Subject]:
        """List all subjects ordered by code."""
        with UnitOfWork(self._database, cancel) as uow:
            return uow.subjects.list_all()

    def get_prerequisite_chain(
        self, code: str, cancel: CancellationToken | None = None
    ) -> list[Subject]:
        """Get the transitive prerequisites of a subject, nearest first.

        Raises:
            SubjectNotFoundError: If the subject doesn't exist.
        """
        with UnitOfWork(self._database, cancel) as uow:
            if not uow.subjects.exists(code):
                raise SubjectNotFoundError(code)
            return PrerequisiteValidator(uow.subjects, uow.enrollments).build_prerequisite_chain(
                code
            )

    # --- Courses and schedules ---

    def create_course(
        self,
        code: str,
        subject_code: str,
        max_enrollment: int | None = None,
        schedule: Schedule | None = None,
        cancel: CancellationToken | None = None,
    ) -> Course:
        """Create a course section, optionally with its schedule.

        Args:
            code: Course section code.
            subject_code: Subject the course offers.
            max_enrollment: Seat limit (None = unlimited).
            schedule: Unsaved schedule for the course; created in the same
                transaction after a room conflict check.
            cancel: Optional cancellation token.

        Raises:
            RecordExistsError: If a course with this code exists.
            SubjectNotFoundError: If the subject doesn't exist.
            ScheduleConflictError: If the schedule double-books its room.
        """
        with UnitOfWork(self._database, cancel) as uow:
            if uow.courses.get(code) is not None:
                raise RecordExistsError("Course", code)
            if not uow.subjects.exists(subject_code):
                raise SubjectNotFoundError(subject_code)

            course = Course(code=code, subject_code=subject_code, max_enrollment=max_enrollment)
            uow.courses.add(course)

            if schedule is not None:
                schedule.course_code = code
                self._check_room(uow, schedule)
                uow.schedules.add(schedule)

            uow.commit()

        logger.info("Created course %s for subject %s (max %s)", code, subject_code, max_enrollment)
        return course

    def update_course(
        self,
        code: str,
        max_enrollment: int | None = None,
        subject_code: str | None = None,
        schedule: Schedule | None = None,
        cancel: CancellationToken | None = None,
    ) -> Course:
        """Update a course section (partial update).

        Fields left as None are unchanged. A given ``schedule`` replaces the
        slot of the course's existing schedule (keeping its ID) or, when the
        course has none, is attached as a new one. Waitlisted students are only
        promoted by withdrawals, so raising the seat limit seats no one.

        Raises:
            CourseNotFoundError: If the course doesn't exist.
            SubjectNotFoundError: If the new subject doesn't exist.
            InvalidScheduleError: If the new slot's start is not before its end.
            ScheduleConflictError: If the new slot double-books its room.
        """
        with UnitOfWork(self._database, cancel) as uow:
            course = uow.courses.get(code)
            if course is None:
                raise CourseNotFoundError(code)

            if subject_code is not None:
                if not uow.subjects.exists(subject_code):
                    raise SubjectNotFoundError(subject_code)
                course.subject_code = subject_code
            if max_enrollment is not None:
                course.max_enrollment = max_enrollment

            if schedule is not None:
                existing = uow.schedules.get_by_course(code)
                if existing is None:
                    schedule.course_code = code
                    self._check_room(uow, schedule)
                    uow.schedules.add(schedule)
                else:
                    self._apply_slot(
                        uow,
                        existing,
                        schedule.day_of_week,
                        schedule.start_time,
                        schedule.end_time,
                        schedule.room_id,
                    )
            uow.commit()

        logger.info("Updated course %s (max %s)", code, course.max_enrollment)
        return course

    def get_course(self, code: str, cancel: CancellationToken | None = None) -> Course:
        """Get a course by code.

        Raises:
            CourseNotFoundError: If the course doesn't exist.
        """
        with UnitOfWork(self._database, cancel) as uow:
            course = uow.courses.get(code)
            if course is None:
                raise CourseNotFoundError(code)
            return course

    def list_courses(
        self, subject_code: str, cancel: CancellationToken | None = None
    ) -> list[Course]:
        """List the sections offering a subject, ordered by code.

        Raises:
            SubjectNotFoundError: If the subject doesn't exist.
        """
        with UnitOfWork(self._database, cancel) as uow:
            if not uow.subjects.exists(subject_code):
                raise SubjectNotFoundError(subject_code)
            return uow.courses.list_by_subject(subject_code)

    def get_course_schedule(
        self, code: str, cancel: CancellationToken | None = None
    ) -> Schedule | None:
        """Get a course's schedule, if it has one."""
        with UnitOfWork(self._database, cancel) as uow:
            return uow.schedules.get_by_course(code)

    def count_enrolled(self, code: str, cancel: CancellationToken | None = None) -> int:
        """Number of Enrolled students in a course."""
        with UnitOfWork(self._database, cancel) as uow:
            return uow.courses.count_enrolled(code)

    def create_schedule(
        self,
        day_of_week: DayOfWeek | str,
        start_time: time,
        end_time: time,
        room_id: str | None = None,
        course_code: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> Schedule:
        """Create a weekly schedule slot.

        Raises:
            InvalidScheduleError: If start_time is not before end_time.
            CourseNotFoundError: If the course doesn't exist.
            RecordExistsError: If the course already has a schedule.
            ScheduleConflictError: If the slot double-books its room.
        """
        schedule = Schedule(
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            room_id=room_id,
            course_code=course_code,
        )

        with UnitOfWork(self._database, cancel) as uow:
            if course_code is not None:
                if uow.courses.get(course_code) is None:
                    raise CourseNotFoundError(course_code)
                if uow.schedules.get_by_course(course_code) is not None:
                    raise RecordExistsError("Schedule for course", course_code)

            self._check_room(uow, schedule)
            uow.schedules.add(schedule)
            uow.commit()

        logger.info(
            "Created schedule %s: %s %s-%s room=%s course=%s",
            schedule.id,
            schedule.day_of_week,
            f"{start_time:%H:%M}",
            f"{end_time:%H:%M}",
            room_id,
            course_code,
        )
        return schedule

    def get_schedule(self, schedule_id: str, cancel: CancellationToken | None = None) -> Schedule:
        """Get a schedule by ID.

        Raises:
            ScheduleNotFoundError: If the schedule doesn't exist.
        """
        with UnitOfWork(self._database, cancel) as uow:
            schedule = uow.schedules.get(schedule_id)
            if schedule is None:
                raise ScheduleNotFoundError(schedule_id)
            return schedule

    def update_schedule(
        self,
        schedule_id: str,
        day_of_week: DayOfWeek | str | None = None,
        start_time: time | None = None,
        end_time: time | None = None,
        room_id: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> Schedule:
        """Move a schedule slot (partial update).

        Fields left as None are unchanged; an empty ``room_id`` clears the
        room. The resulting slot is checked against the rest of its room.

        Raises:
            ScheduleNotFoundError: If the schedule doesn't exist.
            InvalidScheduleError: If start_time is not before end_time.
            ScheduleConflictError: If the slot double-books its room.
        """
        with UnitOfWork(self._database, cancel) as uow:
            schedule = uow.schedules.get(schedule_id)
            if schedule is None:
                raise ScheduleNotFoundError(schedule_id)

            self._apply_slot(
                uow,
                schedule,
                day_of_week if day_of_week is not None else schedule.day_of_week,
                start_time if start_time is not None else schedule.start_time,
                end_time if end_time is not None else schedule.end_time,
                room_id if room_id is not None else schedule.room_id,
            )
            uow.commit()

        logger.info(
            "Updated schedule %s: %s %s-%s room=%s",
            schedule_id,
            schedule.day_of_week,
            f"{schedule.start_time:%H:%M}",
            f"{schedule.end_time:%H:%M}",
            schedule.room_id,
        )
        return schedule

    def delete_schedule(self, schedule_id: str, cancel: CancellationToken | None = None) -> Schedule:
        """Delete a schedule, detaching it from its course.

        Raises:
            ScheduleNotFoundError: If the schedule doesn't exist.
        """
        with UnitOfWork(self._database, cancel) as uow:
            schedule = uow.schedules.get(schedule_id)
            if schedule is None:
                raise ScheduleNotFoundError(schedule_id)
            uow.schedules.delete(schedule)
            uow.commit()

        logger.info("Deleted schedule %s (course=%s)", schedule_id, schedule.course_code)
        return schedule

    def get_schedules_by_room(
        self, room_id: str, cancel: CancellationToken | None = None
    ) -> list[Schedule]:
        """List a room's schedules ordered by day and start time."""
        with UnitOfWork(self._database, cancel) as uow:
            return uow.schedules.get_by_room(room_id)

    # --- Students ---

    def register_student(
        self,
        user_id: str,
        student_code: str,
        full_name: str,
        cancel: CancellationToken | None = None,
    ) -> Student:
        """Register a student.

        Raises:
            RecordExistsError: If the user ID or student code is taken.
        """
        with UnitOfWork(self._database, cancel) as uow:
            if uow.students.get(user_id) is not None:
                raise RecordExistsError("Student", user_id)
            if uow.students.get_by_code(student_code) is not None:
                raise RecordExistsError("Student code", student_code)

            student = Student(user_id=user_id, student_code=student_code, full_name=full_name)
            uow.students.add(student)
            uow.commit()

        logger.info("Registered student %s (%s)", user_id, student_code)
        return student

    def get_student(self, user_id: str, cancel: CancellationToken | None = None) -> Student:
        """Get a student by user ID.

        Raises:
            StudentNotFoundError: If the student doesn't exist.
        """
        with UnitOfWork(self._database, cancel) as uow:
            student = uow.students.get(user_id)
            if student is None:
                raise StudentNotFoundError(user_id)
            return student

    def validate_subjects_for_student(
        self,
        student_id: str,
        subject_codes: list[str],
        cancel: CancellationToken | None = None,
    ) -> dict[str, str | None]:
        """Map each subject code to the prerequisite the student is missing (or None).

        Raises:
            StudentNotFoundError: If the student doesn't exist.
            SubjectNotFoundError: If any subject doesn't exist.
        """
        with UnitOfWork(self._database, cancel) as uow:
            if uow.students.get(student_id) is None:
                raise StudentNotFoundError(student_id)
            validator = PrerequisiteValidator(uow.subjects, uow.enrollments)
            return validator.validate_subjects_for_student(student_id, subject_codes)

    # --- Internals ---

    @staticmethod
    def _checked_prerequisite(
        uow: UnitOfWork, subject_code: str, prerequisite_code: str | None
    ) -> str | None:
        """Validate a prerequisite and return it normalized (None when blank)."""
        candidate = (prerequisite_code or "").strip() or None
        validator = PrerequisiteValidator(uow.subjects, uow.enrollments)
        result = validator.validate_prerequisite(subject_code, candidate)
        if result:
            return candidate

        logger.warning("Rejected prerequisite for %s: %s", subject_code, result.reason)
        if result.kind == ErrorKind.CIRCULAR_PREREQUISITE:
            raise CircularPrerequisiteError(subject_code, candidate or "")
        raise SubjectNotFoundError(candidate or "")

    @classmethod
    def _apply_slot(
        cls,
        uow: UnitOfWork,
        schedule: Schedule,
        day_of_week: DayOfWeek | str,
        start_time: time,
        end_time: time,
        room_id: str | None,
    ) -> None:
        """Move a stored schedule to a new slot and re-check its room."""
        if start_time >= end_time:
            raise InvalidScheduleError(
                f"Invalid time range: start {start_time:%H:%M} must be before end {end_time:%H:%M}"
            )
        schedule.day_of_week = DayOfWeek(day_of_week).value
        schedule.start_time = start_time
        schedule.end_time = end_time
        schedule.room_id = room_id or None
        cls._check_room(uow, schedule)

    @staticmethod
    def _check_room(uow: UnitOfWork, schedule: Schedule) -> None:
        conflict = ScheduleConflictChecker(uow.schedules, uow.enrollments).find_room_conflict(
            schedule
        )
        if conflict is not None:
            raise ScheduleConflictError(
                conflict.course_code,
                conflict.day_of_week,
                conflict.start_time,
                conflict.end_time,
                room_id=conflict.room_id,
            )
