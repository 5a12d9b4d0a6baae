"""Schedule endpoints."""

from fastapi import APIRouter, Query, status

from registrar.api.dependencies import CatalogDep
from registrar.api.models import APIResponse, ScheduleCreate, ScheduleResponse, ScheduleUpdate

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.post(
    "",
    response_model=APIResponse[ScheduleResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_schedule(schedule: ScheduleCreate, catalog: CatalogDep) -> APIResponse[ScheduleResponse]:
    """Create a weekly schedule slot for a room and/or course."""
    created = catalog.create_schedule(
        day_of_week=schedule.day_of_week,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        room_id=schedule.room_id,
        course_code=schedule.course_code,
    )
    return APIResponse(data=ScheduleResponse.model_validate(created))


@router.get("", response_model=APIResponse[list[ScheduleResponse]])
def list_schedules(
    catalog: CatalogDep,
    room_id: str = Query(..., min_length=1, description="Room to list schedules for"),
) -> APIResponse[list[ScheduleResponse]]:
    """List a room's schedules ordered by day and start time."""
    schedules = catalog.get_schedules_by_room(room_id)
    return APIResponse(data=[ScheduleResponse.model_validate(s) for s in schedules])


@router.get("/{schedule_id}", response_model=APIResponse[ScheduleResponse])
def get_schedule(schedule_id: str, catalog: CatalogDep) -> APIResponse[ScheduleResponse]:
    """Get a schedule by ID."""
    schedule = catalog.get_schedule(schedule_id)
    return APIResponse(data=ScheduleResponse.model_validate(schedule))


@router.patch("/{schedule_id}", response_model=APIResponse[ScheduleResponse])
def update_schedule(
    schedule_id: str, schedule: ScheduleUpdate, catalog: CatalogDep
) -> APIResponse[ScheduleResponse]:
    """Move a schedule slot (partial update)."""
    updated = catalog.update_schedule(
        schedule_id,
        day_of_week=schedule.day_of_week,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        room_id=schedule.room_id,
    )
    return APIResponse(data=ScheduleResponse.model_validate(updated))


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(schedule_id: str, catalog: CatalogDep) -> None:
    """Delete a schedule."""
    catalog.delete_schedule(schedule_id)
