"""Subject endpoints."""

from fastapi import APIRouter, status

from registrar.api.dependencies import CatalogDep
from registrar.api.models import (
    APIResponse,
    CourseResponse,
    SubjectCreate,
    SubjectResponse,
    SubjectUpdate,
    course_to_response,
)

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.get("", response_model=APIResponse[list[SubjectResponse]])
def list_subjects(catalog: CatalogDep) -> APIResponse[list[SubjectResponse]]:
    """List all subjects."""
    subjects = catalog.list_subjects()
    return APIResponse(data=[SubjectResponse.model_validate(s) for s in subjects])


@router.post(
    "",
    response_model=APIResponse[SubjectResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_subject(subject: SubjectCreate, catalog: CatalogDep) -> APIResponse[SubjectResponse]:
    """Create a new subject."""
    created = catalog.create_subject(
        code=subject.code,
        name=subject.name,
        description=subject.description,
        default_credits=subject.default_credits,
        prerequisite_code=subject.prerequisite_code,
    )
    return APIResponse(data=SubjectResponse.model_validate(created))


@router.get("/{code}", response_model=APIResponse[SubjectResponse])
def get_subject(code: str, catalog: CatalogDep) -> APIResponse[SubjectResponse]:
    """Get a subject by code."""
    subject = catalog.get_subject(code)
    return APIResponse(data=SubjectResponse.model_validate(subject))


@router.patch("/{code}", response_model=APIResponse[SubjectResponse])
def update_subject(
    code: str, subject: SubjectUpdate, catalog: CatalogDep
) -> APIResponse[SubjectResponse]:
    """Update a subject (partial update)."""
    updated = catalog.update_subject(
        code,
        name=subject.name,
        description=subject.description,
        default_credits=subject.default_credits,
        prerequisite_code=subject.prerequisite_code,
    )
    return APIResponse(data=SubjectResponse.model_validate(updated))


@router.get("/{code}/prerequisites", response_model=APIResponse[list[SubjectResponse]])
def get_prerequisites(code: str, catalog: CatalogDep) -> APIResponse[list[SubjectResponse]]:
    """Get the full prerequisite chain of a subject, nearest first."""
    chain = catalog.get_prerequisite_chain(code)
    return APIResponse(data=[SubjectResponse.model_validate(s) for s in chain])


@router.get("/{code}/courses", response_model=APIResponse[list[CourseResponse]])
def list_courses(code: str, catalog: CatalogDep) -> APIResponse[list[CourseResponse]]:
    """List the sections offering a subject, with seat counts."""
    courses = catalog.list_courses(code)
    return APIResponse(
        data=[
            course_to_response(
                c,
                enrolled_count=catalog.count_enrolled(c.code),
                schedule=catalog.get_course_schedule(c.code),
            )
            for c in courses
        ]
    )
