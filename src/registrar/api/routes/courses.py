"""Course endpoints."""

from fastapi import APIRouter, status

from registrar.api.dependencies import CatalogDep
from registrar.api.models import (
    APIResponse,
    CourseCreate,
    CourseResponse,
    CourseUpdate,
    ScheduleSlot,
    course_to_response,
)
from registrar.store import Schedule

router = APIRouter(prefix="/courses", tags=["courses"])


def _slot_to_schedule(slot: ScheduleSlot | None) -> Schedule | None:
    if slot is None:
        return None
    return Schedule(
        day_of_week=slot.day_of_week,
        start_time=slot.start_time,
        end_time=slot.end_time,
        room_id=slot.room_id,
    )


@router.post(
    "",
    response_model=APIResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_course(course: CourseCreate, catalog: CatalogDep) -> APIResponse[CourseResponse]:
    """Create a course section, optionally with its weekly schedule."""
    schedule = _slot_to_schedule(course.schedule)
    created = catalog.create_course(
        code=course.code,
        subject_code=course.subject_code,
        max_enrollment=course.max_enrollment,
        schedule=schedule,
    )
    return APIResponse(data=course_to_response(created, enrolled_count=0, schedule=schedule))


@router.get("/{code}", response_model=APIResponse[CourseResponse])
def get_course(code: str, catalog: CatalogDep) -> APIResponse[CourseResponse]:
    """Get a course with its seat count and schedule."""
    course = catalog.get_course(code)
    return APIResponse(
        data=course_to_response(
            course,
            enrolled_count=catalog.count_enrolled(code),
            schedule=catalog.get_course_schedule(code),
        )
    )


@router.patch("/{code}", response_model=APIResponse[CourseResponse])
def update_course(
    code: str, course: CourseUpdate, catalog: CatalogDep
) -> APIResponse[CourseResponse]:
    """Update a course section (partial update)."""
    updated = catalog.update_course(
        code,
        max_enrollment=course.max_enrollment,
        subject_code=course.subject_code,
        schedule=_slot_to_schedule(course.schedule),
    )
    return APIResponse(
        data=course_to_response(
            updated,
            enrolled_count=catalog.count_enrolled(code),
            schedule=catalog.get_course_schedule(code),
        )
    )
