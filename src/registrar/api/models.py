"""Pydantic models for REST API."""

from datetime import datetime, time
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from registrar.store.models import DayOfWeek

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None
    error_kind: str | None = None
    details: dict[str, Any] | None = None


# Student models


class StudentCreate(BaseModel):
    """Request model for registering a student."""

    user_id: str = Field(..., min_length=1, max_length=36)
    student_code: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=255)


class StudentResponse(BaseModel):
    """Response model for a student."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    student_code: str
    full_name: str


class EligibilityRequest(BaseModel):
    """Request model for checking prerequisites of several subjects."""

    subject_codes: list[str] = Field(..., min_length=1)


# Subject models


class SubjectCreate(BaseModel):
    """Request model for creating a subject."""

    code: str = Field(..., min_length=1, max_length=50)
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    default_credits: int = Field(default=0, ge=0)
    prerequisite_code: str | None = Field(default=None, max_length=50)


class SubjectUpdate(BaseModel):
    """Request model for updating a subject (partial update).

    An empty ``prerequisite_code`` clears the prerequisite.
    """

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    default_credits: int | None = Field(default=None, ge=0)
    prerequisite_code: str | None = Field(default=None, max_length=50)


class SubjectResponse(BaseModel):
    """Response model for a subject."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    name: str | None
    description: str | None
    default_credits: int
    prerequisite_code: str | None


# Schedule models


class ScheduleSlot(BaseModel):
    """A weekly time slot."""

    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    room_id: str | None = Field(default=None, max_length=50)


class ScheduleCreate(ScheduleSlot):
    """Request model for creating a schedule."""

    course_code: str | None = Field(default=None, max_length=50)


class ScheduleUpdate(BaseModel):
    """Request model for moving a schedule (partial update).

    An empty ``room_id`` clears the room.
    """

    day_of_week: DayOfWeek | None = None
    start_time: time | None = None
    end_time: time | None = None
    room_id: str | None = Field(default=None, max_length=50)


class ScheduleResponse(BaseModel):
    """Response model for a schedule."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    day_of_week: str
    start_time: time
    end_time: time
    room_id: str | None
    course_code: str | None


# Course models


class CourseCreate(BaseModel):
    """Request model for creating a course section."""

    code: str = Field(..., min_length=1, max_length=50)
    subject_code: str = Field(..., min_length=1, max_length=50)
    max_enrollment: int | None = Field(default=None, ge=0)
    schedule: ScheduleSlot | None = None


class CourseUpdate(BaseModel):
    """Request model for updating a course section (partial update)."""

    subject_code: str | None = Field(default=None, min_length=1, max_length=50)
    max_enrollment: int | None = Field(default=None, ge=0)
    schedule: ScheduleSlot | None = None


class CourseResponse(BaseModel):
    """Response model for a course."""

    code: str
    subject_code: str
    max_enrollment: int | None
    enrolled_count: int
    schedule: ScheduleResponse | None = None


def course_to_response(course: Any, enrolled_count: int, schedule: Any = None) -> CourseResponse:
    """Convert a Course model (plus its seat count and schedule) to CourseResponse."""
    return CourseResponse(
        code=course.code,
        subject_code=course.subject_code,
        max_enrollment=course.max_enrollment,
        enrolled_count=enrolled_count,
        schedule=ScheduleResponse.model_validate(schedule) if schedule is not None else None,
    )


# Enrollment models


class EnrollmentCreate(BaseModel):
    """Request model for enrolling in a course."""

    course_code: str = Field(..., min_length=1, max_length=50)


class EnrollmentResponse(BaseModel):
    """Response model for a new enrollment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: str
    course_code: str
    status: str
    enrolled_at: datetime
    is_passed: bool


class EnrollmentDetailResponse(BaseModel):
    """Response model for an entry of a student's enrollment list."""

    model_config = ConfigDict(from_attributes=True)

    student_id: str
    course_code: str
    status: str
    enrolled_at: datetime
    subject_code: str | None
    subject_name: str | None
    waitlist_position: int | None


class SkippedCandidateResponse(BaseModel):
    """A waitlisted student passed over during promotion."""

    student_id: str
    reason: str | None
    kind: str | None


class WithdrawalResponse(BaseModel):
    """Response model for a withdrawal."""

    student_id: str
    course_code: str
    previous_status: str
    promoted_student_id: str | None
    skipped: list[SkippedCandidateResponse]
    rows_affected: int


def withdrawal_to_response(result: Any) -> WithdrawalResponse:
    """Convert a WithdrawalResult to WithdrawalResponse."""
    promotion = result.promotion
    skipped = promotion.skipped if promotion is not None else []
    return WithdrawalResponse(
        student_id=result.student_id,
        course_code=result.course_code,
        previous_status=str(result.previous_status),
        promoted_student_id=promotion.promoted_student_id if promotion is not None else None,
        skipped=[
            SkippedCandidateResponse(
                student_id=check.student_id,
                reason=check.skip_reason,
                kind=str(check.kind) if check.kind is not None else None,
            )
            for check in skipped
        ],
        rows_affected=result.rows_affected,
    )
