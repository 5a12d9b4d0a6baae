"""Unit tests for AdmissionEngine.enroll_student."""

from datetime import UTC, datetime, time

import pytest
from sqlalchemy import func, select

from registrar.cancellation import CancellationToken
from registrar.enrollment import AdmissionEngine
from registrar.exceptions import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    ErrorKind,
    OperationCancelledError,
    PrerequisiteNotMetError,
    ScheduleConflictError,
    StudentNotFoundError,
)
from registrar.store import (
    Course,
    Database,
    Enrollment,
    EnrollmentStatus,
    Schedule,
    Student,
    Subject,
    UnitOfWork,
    WaitlistEntry,
)


def seed(database: Database, *objects: object) -> None:
    """Insert records in one transaction, in the given order."""
    with UnitOfWork(database) as uow:
        for obj in objects:
            uow.session.add(obj)
            uow.session.flush()
        uow.commit()


def count_rows(database: Database, model: type) -> int:
    with UnitOfWork(database) as uow:
        return uow.session.execute(select(func.count()).select_from(model)).scalar_one()


@pytest.fixture
def catalog(database: Database) -> Database:
    """Subjects CS101 <- CS102 and MATH101, students s1..s3."""
    seed(
        database,
        Subject("CS101", name="Intro"),
        Subject("CS102", name="Programming", prerequisite_code="CS101"),
        Subject("MATH101", name="Calculus"),
        Course("CS101.1", "CS101", max_enrollment=30),
        Course("CS102.1", "CS102", max_enrollment=30),
        Course("MATH101.1", "MATH101", max_enrollment=1),
        Course("MATH101.2", "MATH101"),
        Student("s1", "ST-001", "Ada Lovelace"),
        Student("s2", "ST-002", "Alan Turing"),
        Student("s3", "ST-003", "Grace Hopper"),
    )
    return database


@pytest.fixture
def engine(catalog: Database, clock) -> AdmissionEngine:
    return AdmissionEngine(catalog, clock=clock)


@pytest.mark.unit
class TestEnrollStudent:
    """Tests for enroll_student."""

    def test_enroll_with_free_seat(self, engine: AdmissionEngine) -> None:
        enrollment = engine.enroll_student("s1", "CS101.1")

        assert enrollment.id is not None
        assert enrollment.student_id == "s1"
        assert enrollment.course_code == "CS101.1"
        assert enrollment.enrollment_status == EnrollmentStatus.ENROLLED
        assert enrollment.is_passed is False

    def test_unknown_student(self, engine: AdmissionEngine) -> None:
        with pytest.raises(StudentNotFoundError) as exc_info:
            engine.enroll_student("ghost", "CS101.1")

        assert exc_info.value.kind == ErrorKind.NOT_FOUND

    def test_unknown_course(self, engine: AdmissionEngine) -> None:
        with pytest.raises(CourseNotFoundError):
            engine.enroll_student("s1", "NOPE.1")

    def test_duplicate_enrollment_rejected(self, engine: AdmissionEngine, catalog: Database) -> None:
        """A second request for the same pair fails and leaves one row."""
        engine.enroll_student("s1", "CS101.1")

        with pytest.raises(AlreadyEnrolledError) as exc_info:
            engine.enroll_student("s1", "CS101.1")

        assert exc_info.value.status == "enrolled"
        assert count_rows(catalog, Enrollment) == 1

    def test_duplicate_while_waitlisted_rejected(self, engine: AdmissionEngine) -> None:
        engine.enroll_student("s1", "MATH101.1")
        engine.enroll_student("s2", "MATH101.1")

        with pytest.raises(AlreadyEnrolledError) as exc_info:
            engine.enroll_student("s2", "MATH101.1")

        assert exc_info.value.status == "waitlisted"


@pytest.mark.unit
class TestPrerequisites:
    """Prerequisite enforcement on enrollment."""

    def test_missing_prerequisite_then_satisfied(
        self, engine: AdmissionEngine, catalog: Database
    ) -> None:
        """CS102 requires CS101; enrolling in CS101 first unblocks it."""
        with pytest.raises(PrerequisiteNotMetError) as exc_info:
            engine.enroll_student("s1", "CS102.1")

        assert exc_info.value.prerequisite_code == "CS101"
        assert exc_info.value.subject_code == "CS102"
        assert str(exc_info.value) == "Student must complete CS101 before taking CS102"
        assert count_rows(catalog, Enrollment) == 0

        engine.enroll_student("s1", "CS101.1")
        enrollment = engine.enroll_student("s1", "CS102.1")

        assert enrollment.enrollment_status == EnrollmentStatus.ENROLLED


@pytest.mark.unit
class TestScheduleConflicts:
    """Schedule conflict enforcement on enrollment."""

    @pytest.fixture
    def scheduled(self, catalog: Database) -> Database:
        seed(
            catalog,
            Course("MATH101.3", "MATH101"),
            Course("MATH101.4", "MATH101"),
            Schedule("monday", time(9), time(11), course_code="CS101.1"),
            Schedule("monday", time(10), time(12), course_code="MATH101.3"),
            Schedule("monday", time(11), time(13), course_code="MATH101.4"),
        )
        return catalog

    def test_overlapping_course_rejected(self, scheduled: Database, clock) -> None:
        engine = AdmissionEngine(scheduled, clock=clock)
        engine.enroll_student("s1", "CS101.1")

        with pytest.raises(ScheduleConflictError) as exc_info:
            engine.enroll_student("s1", "MATH101.3")

        detail = exc_info.value.to_detail()
        assert detail["course_code"] == "CS101.1"
        assert detail["day_of_week"] == "monday"
        assert detail["start_time"] == "09:00"
        assert detail["end_time"] == "11:00"

    def test_back_to_back_course_allowed(self, scheduled: Database, clock) -> None:
        engine = AdmissionEngine(scheduled, clock=clock)
        engine.enroll_student("s1", "CS101.1")

        enrollment = engine.enroll_student("s1", "MATH101.4")

        assert enrollment.enrollment_status == EnrollmentStatus.ENROLLED


@pytest.mark.unit
class TestCapacity:
    """Capacity and waitlisting."""

    def test_full_course_waitlists(self, engine: AdmissionEngine, catalog: Database) -> None:
        """Capacity 1: the second student is waitlisted with a queue entry."""
        first = engine.enroll_student("s1", "MATH101.1")
        second = engine.enroll_student("s2", "MATH101.1")

        assert first.enrollment_status == EnrollmentStatus.ENROLLED
        assert second.enrollment_status == EnrollmentStatus.WAITLISTED

        with UnitOfWork(catalog) as uow:
            queue = uow.waitlist.get_by_course("MATH101.1")
            assert [e.student_id for e in queue] == ["s2"]
            assert queue[0].enrollment_id == second.id
            assert uow.courses.count_enrolled("MATH101.1") == 1

    def test_unlimited_course_never_waitlists(self, engine: AdmissionEngine) -> None:
        for student_id in ("s1", "s2", "s3"):
            enrollment = engine.enroll_student(student_id, "MATH101.2")
            assert enrollment.enrollment_status == EnrollmentStatus.ENROLLED

    def test_zero_capacity_waitlists_first_request(
        self, catalog: Database, clock
    ) -> None:
        seed(catalog, Course("MATH101.9", "MATH101", max_enrollment=0))
        engine = AdmissionEngine(catalog, clock=clock)

        enrollment = engine.enroll_student("s1", "MATH101.9")

        assert enrollment.enrollment_status == EnrollmentStatus.WAITLISTED

    def test_waitlisted_do_not_count_toward_capacity(
        self, engine: AdmissionEngine, catalog: Database
    ) -> None:
        engine.enroll_student("s1", "MATH101.1")
        engine.enroll_student("s2", "MATH101.1")
        engine.enroll_student("s3", "MATH101.1")

        with UnitOfWork(catalog) as uow:
            assert uow.courses.count_enrolled("MATH101.1") == 1
            assert [e.student_id for e in uow.waitlist.get_by_course("MATH101.1")] == ["s2", "s3"]


@pytest.mark.unit
class TestCancellation:
    """Cancelled enrollments leave no trace."""

    def test_cancelled_before_start(self, engine: AdmissionEngine, catalog: Database) -> None:
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            engine.enroll_student("s1", "CS101.1", cancel=token)

        assert count_rows(catalog, Enrollment) == 0

    def test_cancelled_before_commit(self, catalog: Database) -> None:
        """Cancellation after validation still rolls back enrollment and waitlist rows."""
        token = CancellationToken()

        def cancelling_clock():
            token.cancel()
            return datetime(2026, 1, 5, 9, 0, tzinfo=UTC)

        engine = AdmissionEngine(catalog, clock=cancelling_clock)
        engine.enroll_student("s1", "MATH101.1")

        with pytest.raises(OperationCancelledError):
            engine.enroll_student("s2", "MATH101.1", cancel=token)

        assert count_rows(catalog, Enrollment) == 1
        assert count_rows(catalog, WaitlistEntry) == 0

    def test_expired_deadline(self, engine: AdmissionEngine, catalog: Database) -> None:
        token = CancellationToken.with_timeout(0)

        with pytest.raises(OperationCancelledError):
            engine.enroll_student("s1", "CS101.1", cancel=token)

        assert count_rows(catalog, Enrollment) == 0
