"""Data models for the enrollment module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from registrar.exceptions import ErrorKind
    from registrar.store.models import Enrollment, EnrollmentStatus


@dataclass
class CandidateCheck:
    """Result of re-validating one waitlisted student during promotion.

    Attributes:
        student_id: The waitlisted student.
        eligible: Whether the student can take the freed seat.
        skip_reason: Why the student was passed over (None if eligible).
        kind: Error kind behind the skip, if it came from a validator.
        enrollment: The student's waitlisted enrollment, when it exists.
    """

    student_id: str
    eligible: bool
    skip_reason: str | None = None
    kind: ErrorKind | None = None
    enrollment: Enrollment | None = None


@dataclass
class PromotionResult:
    """Outcome of one waitlist promotion pass.

    Attributes:
        course_code: Course whose seat was freed.
        promoted_student_id: Student moved from Waitlisted to Enrolled, if any.
        skipped: Candidates passed over, in FIFO order.
    """

    course_code: str
    promoted_student_id: str | None = None
    skipped: list[CandidateCheck] = field(default_factory=list)


@dataclass
class WithdrawalResult:
    """Outcome of a withdrawal.

    Attributes:
        student_id: The withdrawing student.
        course_code: The course withdrawn from.
        previous_status: Status the enrollment had before withdrawal.
        promotion: Promotion pass result; None when the withdrawn
            enrollment was only waitlisted.
        rows_affected: Rows written by the committed transaction.
    """

    student_id: str
    course_code: str
    previous_status: EnrollmentStatus
    promotion: PromotionResult | None = None
    rows_affected: int = 0


@dataclass
class EnrollmentDetail:
    """A student's enrollment with its subject information."""

    student_id: str
    course_code: str
    status: str
    enrolled_at: datetime
    subject_code: str | None
    subject_name: str | None
    waitlist_position: int | None = None
