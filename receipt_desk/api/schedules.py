# receipt_desk/api/schedules.py

from typing import List

from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from receipt_desk.api.deps import get_storage
from receipt_desk.db.storage import Storage
from receipt_desk.errors import NotFoundError
from receipt_desk.models.schedules import Schedule, ScheduleCreate, ScheduleUpdate

router = APIRouter(prefix="/api/schedules", tags=["schedules"])


@router.get("", response_model=List[Schedule])
def list_schedules(storage: Storage = Depends(get_storage)) -> List[Schedule]:
    return storage.list_schedules()


@router.post("", response_model=Schedule, status_code=HTTP_201_CREATED)
def create_schedule(
    payload: ScheduleCreate,
    storage: Storage = Depends(get_storage),
) -> Schedule:
    """
    Stores an export schedule. Schedules are configuration only; nothing
    runs them.
    """
    return storage.create_schedule(payload)


@router.patch("/{schedule_id}", response_model=Schedule)
def update_schedule(
    schedule_id: str,
    payload: ScheduleUpdate,
    storage: Storage = Depends(get_storage),
) -> Schedule:
    """
    Merges the supplied fields into the schedule. ``id`` and ``createdAt``
    cannot be changed and are rejected.
    """
    schedule = storage.update_schedule(schedule_id, payload)
    if schedule is None:
        raise NotFoundError("Schedule not found")
    return schedule


@router.delete("/{schedule_id}")
def delete_schedule(schedule_id: str, storage: Storage = Depends(get_storage)) -> dict:
    if not storage.delete_schedule(schedule_id):
        raise NotFoundError("Schedule not found")
    return {"message": "Schedule deleted successfully"}
