"""Unit tests for record store models."""

from datetime import time

import pytest

from registrar.exceptions import InvalidScheduleError
from registrar.store import (
    DayOfWeek,
    Enrollment,
    EnrollmentStatus,
    Schedule,
    Subject,
    WaitlistEntry,
)


@pytest.mark.unit
class TestEnrollmentStatus:
    """Tests for EnrollmentStatus enum."""

    def test_values(self) -> None:
        assert EnrollmentStatus.ENROLLED.value == "enrolled"
        assert EnrollmentStatus.WAITLISTED.value == "waitlisted"

    def test_is_string(self) -> None:
        assert EnrollmentStatus.ENROLLED == "enrolled"


@pytest.mark.unit
class TestSchedule:
    """Tests for the Schedule model."""

    def test_valid_schedule(self) -> None:
        schedule = Schedule(DayOfWeek.MONDAY, time(9), time(11), room_id="R1")

        assert schedule.id is not None
        assert schedule.day_of_week == "monday"
        assert schedule.day == DayOfWeek.MONDAY
        assert schedule.room_id == "R1"
        assert schedule.course_code is None

    def test_day_from_string(self) -> None:
        assert Schedule("friday", time(9), time(10)).day == DayOfWeek.FRIDAY

    def test_unknown_day_rejected(self) -> None:
        with pytest.raises(ValueError):
            Schedule("someday", time(9), time(10))

    def test_start_after_end_rejected(self) -> None:
        with pytest.raises(InvalidScheduleError) as exc_info:
            Schedule("monday", time(11), time(9))

        assert "11:00" in str(exc_info.value)

    def test_empty_range_rejected(self) -> None:
        with pytest.raises(InvalidScheduleError):
            Schedule("monday", time(9), time(9))

    def test_unique_ids(self) -> None:
        first = Schedule("monday", time(9), time(10))
        second = Schedule("monday", time(9), time(10))

        assert first.id != second.id


@pytest.mark.unit
class TestEnrollment:
    """Tests for the Enrollment model."""

    def test_defaults(self) -> None:
        enrollment = Enrollment("s1", "CS101.1")

        assert enrollment.status == "enrolled"
        assert enrollment.is_passed is False
        assert enrollment.enrolled_at is not None

    def test_status_property_roundtrip(self) -> None:
        enrollment = Enrollment("s1", "CS101.1", status=EnrollmentStatus.WAITLISTED)

        assert enrollment.enrollment_status == EnrollmentStatus.WAITLISTED
        enrollment.enrollment_status = EnrollmentStatus.ENROLLED
        assert enrollment.status == "enrolled"

    def test_invalid_status_rejected(self) -> None:
        with pytest.raises(ValueError):
            Enrollment("s1", "CS101.1", status="dropped")


@pytest.mark.unit
class TestWaitlistEntry:
    """Tests for the WaitlistEntry model."""

    def test_copies_pair_from_enrollment(self) -> None:
        enrollment = Enrollment("s1", "CS101.1", status=EnrollmentStatus.WAITLISTED)

        entry = WaitlistEntry(enrollment)

        assert entry.student_id == "s1"
        assert entry.course_code == "CS101.1"
        assert entry.enrollment is enrollment
        assert entry.created_at is not None


@pytest.mark.unit
class TestSubject:
    def test_repr(self) -> None:
        subject = Subject("CS102", prerequisite_code="CS101")

        assert "CS102" in repr(subject)
        assert "CS101" in repr(subject)
