from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.utils.auth import Caller, get_caller
from app.services.schedule_service import ScheduleService
from app.services.store import TimetableStore
from app.schemas.timetable import EntryCreated, EntryIn, EntryOut, EntryUpdate
from app.utils.conflict import WEEKDAYS

router = APIRouter(prefix="/api/schedule", tags=["Schedule"])

Weekday = Literal[WEEKDAYS]


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    return ScheduleService(TimetableStore(db))


@router.get("", response_model=List[EntryOut])
def list_schedule(
    caller: Caller = Depends(get_caller),
    service: ScheduleService = Depends(get_schedule_service),
    class_id: Optional[str] = Query(None, description="班級, e.g. 1A (ignored for students)"),
    day: Optional[Weekday] = Query(None, description="only entries held on this weekday"),
):
    entries = service.list_entries(caller, class_filter=class_id, weekday=day)
    return [EntryOut.model_validate(e) for e in entries]


@router.get("/{entry_id}", response_model=EntryOut)
def get_schedule_entry(
    entry_id: int,
    caller: Caller = Depends(get_caller),
    service: ScheduleService = Depends(get_schedule_service),
):
    return EntryOut.model_validate(service.get_entry(entry_id, caller))


@router.post("", response_model=EntryCreated, status_code=201)
def add_entry(
    body: EntryIn,
    caller: Caller = Depends(get_caller),
    service: ScheduleService = Depends(get_schedule_service),
):
    entry_id = service.create_entry(body.model_dump(), caller)
    return EntryCreated(message="Class added successfully", id=entry_id)


@router.put("/{entry_id}")
def update_entry(
    entry_id: int,
    body: EntryUpdate,
    caller: Caller = Depends(get_caller),
    service: ScheduleService = Depends(get_schedule_service),
):
    # only what the client actually sent
    service.update_entry(entry_id, body.model_dump(exclude_unset=True), caller)
    return {"message": "Class updated successfully"}


@router.delete("/{entry_id}")
def delete_entry(
    entry_id: int,
    caller: Caller = Depends(get_caller),
    service: ScheduleService = Depends(get_schedule_service),
):
    service.delete_entry(entry_id, caller)
    return {"message": "Class deleted successfully"}
