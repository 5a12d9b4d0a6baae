"""AdmissionEngine - enrollment admission control and waitlist promotion."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from registrar.exceptions import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    ErrorKind,
    PrerequisiteNotMetError,
    RegistrarError,
    ScheduleConflictError,
    StudentNotFoundError,
)
from registrar.enrollment.models import (
    CandidateCheck,
    EnrollmentDetail,
    PromotionResult,
    WithdrawalResult,
)
from registrar.store import Enrollment, EnrollmentStatus, UnitOfWork, WaitlistEntry
from registrar.store.models import utcnow
from registrar.validation import PrerequisiteValidator, ScheduleConflictChecker

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from registrar.cancellation import CancellationToken
    from registrar.store import Course, Database
    from registrar.store.interfaces import CourseLookup, EnrollmentLookup, WaitlistQueue

logger = logging.getLogger(__name__)


class AdmissionEngine:
    """Decides whether enrollment requests are seated, waitlisted or rejected.

    The engine is the only writer of enrollment and waitlist lifecycle
    transitions. Every public operation runs in its own UnitOfWork, so the
    capacity check and the write (or the waitlist scan and the promotion)
    commit together or not at all.
    """

    def __init__(
        self,
        database: Database,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the engine.

        Args:
            database: Database holding the record store.
            clock: Source of enrollment and waitlist timestamps.
        """
        self._database = database
        self._clock = clock

    def enroll_student(
        self,
        student_id: str,
        course_code: str,
        cancel: CancellationToken | None = None,
    ) -> Enrollment:
        """Request a seat for a student in a course.

        When the course is at capacity the enrollment is created Waitlisted
        together with a waitlist entry; callers must inspect the returned
        status rather than assume the student was seated.

        Args:
            student_id: The student's user ID.
            course_code: The course section code.
            cancel: Optional cancellation token.

        Returns:
            The created Enrollment (status Enrolled or Waitlisted).

        Raises:
            StudentNotFoundError: If the student doesn't exist.
            CourseNotFoundError: If the course doesn't exist.
            SubjectNotFoundError: If the course's subject doesn't exist.
            AlreadyEnrolledError: If the pair already has an enrollment.
            PrerequisiteNotMetError: If the subject's prerequisite is missing.
            ScheduleConflictError: If the course overlaps an enrolled course.
            OperationCancelledError: If cancelled before commit.
        """
        try:
            with UnitOfWork(self._database, cancel) as uow:
                enrollment = self._admit(uow, student_id, course_code)
                uow.commit()
        except RegistrarError as e:
            logger.info(
                "Enrollment of student %s in %s rejected (%s): %s",
                student_id,
                course_code,
                e.kind,
                e,
            )
            raise

        logger.info(
            "Student %s %s in course %s",
            student_id,
            enrollment.status,
            course_code,
        )
        return enrollment

    def withdraw_student(
        self,
        student_id: str,
        course_code: str,
        cancel: CancellationToken | None = None,
    ) -> WithdrawalResult:
        """Remove a student's enrollment and hand a freed seat to the waitlist.

        Promotion only runs when the withdrawn enrollment held a seat, and
        its per-candidate failures never fail the withdrawal.

        Args:
            student_id: The student's user ID.
            course_code: The course section code.
            cancel: Optional cancellation token.

        Returns:
            WithdrawalResult describing the withdrawal and any promotion.

        Raises:
            EnrollmentNotFoundError: If the pair has no enrollment.
            OperationCancelledError: If cancelled before commit.
        """
        with UnitOfWork(self._database, cancel) as uow:
            enrollment = uow.enrollments.get(student_id, course_code)
            if enrollment is None:
                raise EnrollmentNotFoundError(student_id, course_code)

            previous_status = enrollment.enrollment_status

            entry = uow.waitlist.get_by_student_and_course(student_id, course_code)
            if entry is not None:
                uow.waitlist.delete(entry)
            uow.enrollments.delete(enrollment)

            promotion = None
            if previous_status == EnrollmentStatus.ENROLLED:
                promotion = self._promote_next(uow, course_code)

            rows = uow.commit()

        logger.info(
            "Student %s withdrew from %s (was %s)",
            student_id,
            course_code,
            previous_status,
        )
        return WithdrawalResult(
            student_id=student_id,
            course_code=course_code,
            previous_status=previous_status,
            promotion=promotion,
            rows_affected=rows,
        )

    def get_enrollment_details(
        self,
        student_id: str,
        cancel: CancellationToken | None = None,
    ) -> list[EnrollmentDetail]:
        """List a student's enrollments with subject info and waitlist position.

        Raises:
            StudentNotFoundError: If the student doesn't exist.
        """
        with UnitOfWork(self._database, cancel) as uow:
            if uow.students.get(student_id) is None:
                raise StudentNotFoundError(student_id)

            details = []
            for enrollment in uow.enrollments.get_by_student(student_id):
                course = uow.courses.get(enrollment.course_code)
                subject = uow.subjects.get(course.subject_code) if course is not None else None

                position = None
                if enrollment.status == EnrollmentStatus.WAITLISTED.value:
                    queue = uow.waitlist.get_by_course(enrollment.course_code)
                    position = next(
                        (i for i, e in enumerate(queue, start=1) if e.student_id == student_id),
                        None,
                    )

                details.append(
                    EnrollmentDetail(
                        student_id=enrollment.student_id,
                        course_code=enrollment.course_code,
                        status=enrollment.status,
                        enrolled_at=enrollment.enrolled_at,
                        subject_code=course.subject_code if course is not None else None,
                        subject_name=subject.name if subject is not None else None,
                        waitlist_position=position,
                    )
                )
            return details

    # --- Internals ---

    def _admit(self, uow: UnitOfWork, student_id: str, course_code: str) -> Enrollment:
        """Validate and stage a new enrollment. Raises before any write."""
        if uow.students.get(student_id) is None:
            raise StudentNotFoundError(student_id)

        course = uow.courses.get(course_code)
        if course is None:
            raise CourseNotFoundError(course_code)

        existing = uow.enrollments.get(student_id, course_code)
        if existing is not None:
            raise AlreadyEnrolledError(student_id, course_code, existing.status)

        prerequisites = PrerequisiteValidator(uow.subjects, uow.enrollments)
        eligibility = prerequisites.can_take_subject(student_id, course.subject_code)
        if not eligibility:
            raise PrerequisiteNotMetError(course.subject_code, eligibility.reason or "")

        checker = ScheduleConflictChecker(uow.schedules, uow.enrollments)
        conflict = checker.student_conflict(student_id, course_code)
        if conflict is not None:
            raise ScheduleConflictError(
                conflict.course_code,
                conflict.schedule.day_of_week,
                conflict.schedule.start_time,
                conflict.schedule.end_time,
            )

        at_capacity = self._is_at_capacity(uow.courses, course)
        now = self._clock()
        status = EnrollmentStatus.WAITLISTED if at_capacity else EnrollmentStatus.ENROLLED

        enrollment = Enrollment(
            student_id=student_id,
            course_code=course_code,
            status=status,
            enrolled_at=now,
        )
        uow.enrollments.add(enrollment)
        if at_capacity:
            uow.waitlist.add(WaitlistEntry(enrollment=enrollment, created_at=now))

        return enrollment

    @staticmethod
    def _is_at_capacity(courses: CourseLookup, course: Course) -> bool:
        """A course without a maximum never fills; a full course waitlists at equality."""
        if course.max_enrollment is None:
            return False
        return courses.count_enrolled(course.code) >= course.max_enrollment

    def _promote_next(self, uow: UnitOfWork, course_code: str) -> PromotionResult:
        """Hand a freed seat to the waitlist, if the course really has one free."""
        course = uow.courses.get(course_code)
        if course is None or not uow.subjects.exists(course.subject_code):
            logger.warning("Cannot promote waitlist for %s: course or subject missing", course_code)
            return PromotionResult(course_code=course_code)
        if self._is_at_capacity(uow.courses, course):
            logger.info("No free seat in %s after withdrawal; waitlist unchanged", course_code)
            return PromotionResult(course_code=course_code)

        return self._promote_first_eligible(
            course,
            uow.waitlist,
            uow.enrollments,
            PrerequisiteValidator(uow.subjects, uow.enrollments),
            ScheduleConflictChecker(uow.schedules, uow.enrollments),
        )

    @classmethod
    def _promote_first_eligible(
        cls,
        course: Course,
        waitlist: WaitlistQueue,
        enrollments: EnrollmentLookup,
        prerequisites: PrerequisiteValidator,
        checker: ScheduleConflictChecker,
    ) -> PromotionResult:
        """Seat the first waitlisted student, in FIFO order, who still validates.

        Candidates that fail validation keep their enrollment and queue
        position; the scan moves on to the next entry and stops after the
        first promotion.
        """
        result = PromotionResult(course_code=course.code)

        for entry in waitlist.get_by_course(course.code):
            check = cls._evaluate_candidate(enrollments, entry, course, prerequisites, checker)
            if not check.eligible or check.enrollment is None:
                logger.info(
                    "Skipping waitlisted student %s for %s: %s",
                    check.student_id,
                    course.code,
                    check.skip_reason,
                )
                result.skipped.append(check)
                continue

            check.enrollment.enrollment_status = EnrollmentStatus.ENROLLED
            waitlist.delete(entry)
            result.promoted_student_id = entry.student_id
            logger.info("Promoted student %s from waitlist of %s", entry.student_id, course.code)
            break
        else:
            logger.info("No waitlisted student qualifies for the free seat in %s", course.code)

        return result

    @staticmethod
    def _evaluate_candidate(
        enrollments: EnrollmentLookup,
        entry: WaitlistEntry,
        course: Course,
        prerequisites: PrerequisiteValidator,
        checker: ScheduleConflictChecker,
    ) -> CandidateCheck:
        """Re-run admission checks for one waitlisted student."""
        enrollment = enrollments.get(entry.student_id, course.code)
        if enrollment is None or enrollment.status != EnrollmentStatus.WAITLISTED.value:
            return CandidateCheck(
                student_id=entry.student_id,
                eligible=False,
                skip_reason="no waitlisted enrollment",
            )

        eligibility = prerequisites.can_take_subject(entry.student_id, course.subject_code)
        if not eligibility:
            return CandidateCheck(
                student_id=entry.student_id,
                eligible=False,
                skip_reason=f"missing prerequisite {eligibility.reason}",
                kind=ErrorKind.PREREQUISITE_NOT_MET,
                enrollment=enrollment,
            )

        conflict = checker.student_conflict(entry.student_id, course.code)
        if conflict is not None:
            return CandidateCheck(
                student_id=entry.student_id,
                eligible=False,
                skip_reason=f"schedule conflict with {conflict.course_code}",
                kind=ErrorKind.SCHEDULE_CONFLICT,
                enrollment=enrollment,
            )

        return CandidateCheck(student_id=entry.student_id, eligible=True, enrollment=enrollment)
