"""Student and enrollment endpoints."""

from fastapi import APIRouter, status

from registrar.api.dependencies import CatalogDep, EngineDep
from registrar.api.models import (
    APIResponse,
    EligibilityRequest,
    EnrollmentCreate,
    EnrollmentDetailResponse,
    EnrollmentResponse,
    StudentCreate,
    StudentResponse,
    WithdrawalResponse,
    withdrawal_to_response,
)

router = APIRouter(prefix="/students", tags=["students"])


@router.post(
    "",
    response_model=APIResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def register_student(student: StudentCreate, catalog: CatalogDep) -> APIResponse[StudentResponse]:
    """Register a new student."""
    created = catalog.register_student(
        user_id=student.user_id,
        student_code=student.student_code,
        full_name=student.full_name,
    )
    return APIResponse(data=StudentResponse.model_validate(created))


@router.get("/{user_id}", response_model=APIResponse[StudentResponse])
def get_student(user_id: str, catalog: CatalogDep) -> APIResponse[StudentResponse]:
    """Get a student by user ID."""
    student = catalog.get_student(user_id)
    return APIResponse(data=StudentResponse.model_validate(student))


@router.get(
    "/{user_id}/enrollments",
    response_model=APIResponse[list[EnrollmentDetailResponse]],
)
def list_enrollments(user_id: str, engine: EngineDep) -> APIResponse[list[EnrollmentDetailResponse]]:
    """List a student's enrollments, including waitlist positions."""
    details = engine.get_enrollment_details(user_id)
    return APIResponse(data=[EnrollmentDetailResponse.model_validate(d) for d in details])


@router.post(
    "/{user_id}/enrollments",
    response_model=APIResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
)
def enroll(
    user_id: str, request: EnrollmentCreate, engine: EngineDep
) -> APIResponse[EnrollmentResponse]:
    """Enroll a student in a course; the response status says enrolled or waitlisted."""
    enrollment = engine.enroll_student(user_id, request.course_code)
    return APIResponse(data=EnrollmentResponse.model_validate(enrollment))


@router.delete(
    "/{user_id}/enrollments/{course_code}",
    response_model=APIResponse[WithdrawalResponse],
)
def withdraw(user_id: str, course_code: str, engine: EngineDep) -> APIResponse[WithdrawalResponse]:
    """Withdraw a student from a course, promoting from the waitlist if a seat frees up."""
    result = engine.withdraw_student(user_id, course_code)
    return APIResponse(data=withdrawal_to_response(result))


@router.post(
    "/{user_id}/eligibility",
    response_model=APIResponse[dict[str, str | None]],
)
def check_eligibility(
    user_id: str, request: EligibilityRequest, catalog: CatalogDep
) -> APIResponse[dict[str, str | None]]:
    """Map each subject to the prerequisite the student is missing (null if none)."""
    results = catalog.validate_subjects_for_student(user_id, request.subject_codes)
    return APIResponse(data=results)
