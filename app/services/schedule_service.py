# app/services/schedule_service.py
import logging
from typing import List, Mapping, Optional

from app.errors import (
    ClassConflict, Internal, InvalidWeekdays, MissingFields, NotFound, RoomConflict,
)
from app.models.timetable_entry import TimetableEntry
from app.services.conflict_checker import ConflictKind, ConflictResult, check_conflicts
from app.services.locks import ScopeLocks, entry_scopes, scope_locks
from app.services.store import UPDATABLE_FIELDS, TimetableStore
from app.utils.auth import Caller, require_teacher
from app.utils.conflict import WEEKDAYS, EntryDraft, normalize

logger = logging.getLogger("app.schedule")

REQUIRED_FIELDS = ("class_id", "room", "subject", "start_time", "end_time")


def _blank(value) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _clean(value):
    return value.strip() if isinstance(value, str) else value


def _as_fields(entry: TimetableEntry) -> dict:
    return {
        "class_id": entry.class_id,
        "room": entry.room,
        "subject": entry.subject,
        "start_time": entry.start_time,
        "end_time": entry.end_time,
        **entry.weekdays.as_dict(),
    }


def _rejection(result: ConflictResult):
    if result.kind is ConflictKind.CLASS:
        return ClassConflict(conflict_id=result.entry_id)
    return RoomConflict(conflict_id=result.entry_id)


def validate_entry(fields: Mapping[str, object]) -> EntryDraft:
    """
    Raw request fields -> EntryDraft

    MissingFields for absent/blank class, room, subject or times,
    then InvalidWeekdays / InvalidRange from normalize().
    """
    missing = [name for name in REQUIRED_FIELDS if _blank(fields.get(name))]
    if missing:
        raise MissingFields(f"Missing required fields: {', '.join(missing)}")

    time_range, weekdays = normalize(fields["start_time"], fields["end_time"], fields)
    return EntryDraft(
        class_id=_clean(fields["class_id"]),
        room=_clean(fields["room"]),
        subject=_clean(fields["subject"]),
        time_range=time_range,
        weekdays=weekdays,
    )


class ScheduleService:
    """
    Write path: authorize -> validate -> conflict check (class, then room) -> commit.

    The check and the write run inside one store transaction while the
    class and room scope locks are held, so two writers proposing
    colliding entries cannot both pass the check.
    """

    def __init__(self, store: TimetableStore, locks: ScopeLocks = scope_locks):
        self.store = store
        self.locks = locks

    def create_entry(self, fields: Mapping[str, object], caller: Caller) -> int:
        require_teacher(caller)
        draft = validate_entry(fields)
        scopes = entry_scopes(draft.class_id, draft.room)

        with self.locks.hold(*scopes):
            with self.store.transaction():
                self.store.lock_scopes(scopes)
                result = check_conflicts(self.store, draft)
                if result:
                    raise _rejection(result)
                entry_id = self.store.insert(caller.id, draft.to_columns())

        logger.info(
            "Entry %s created by %s: %s/%s %s-%s %s",
            entry_id, caller.username, draft.class_id, draft.room,
            draft.time_range.start, draft.time_range.end, ",".join(draft.weekdays.active_days()),
        )
        return entry_id

    def update_entry(self, entry_id: int, fields: Mapping[str, object], caller: Caller) -> None:
        require_teacher(caller)
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if not changes:
            raise MissingFields("No fields to update")

        with self.store.transaction():
            current = self.store.get(entry_id)
        if current is None:
            raise NotFound()
        draft = validate_entry({**_as_fields(current), **changes})
        scopes = entry_scopes(draft.class_id, draft.room)

        with self.locks.hold(*scopes):
            with self.store.transaction():
                self.store.lock_scopes(scopes)
                # re-read under the lock, another writer may have moved it
                current = self.store.get(entry_id)
                if current is None:
                    raise NotFound()
                draft = validate_entry({**_as_fields(current), **changes})
                if entry_scopes(draft.class_id, draft.room) != scopes:
                    raise Internal("Entry changed concurrently, try again")

                result = check_conflicts(self.store, draft, exclude_id=entry_id)
                if result:
                    raise _rejection(result)
                if self.store.update(entry_id, draft.to_columns()) == 0:
                    raise NotFound()

        logger.info("Entry %s updated by %s (%s)", entry_id, caller.username, ", ".join(sorted(changes)))

    def delete_entry(self, entry_id: int, caller: Caller) -> None:
        require_teacher(caller)
        with self.store.transaction():
            if self.store.delete(entry_id) == 0:
                raise NotFound()
        logger.info("Entry %s deleted by %s", entry_id, caller.username)

    def list_entries(
        self,
        caller: Caller,
        class_filter: Optional[str] = None,
        weekday: Optional[str] = None,
    ) -> List[TimetableEntry]:
        # students only ever see their own class
        if not caller.is_teacher:
            if not caller.class_id:
                return []
            class_filter = caller.class_id

        if weekday is not None and weekday not in WEEKDAYS:
            raise InvalidWeekdays(f"Unknown weekday: {weekday}")

        with self.store.transaction():
            return self.store.list(class_filter or None, weekday)

    def get_entry(self, entry_id: int, caller: Caller) -> TimetableEntry:
        with self.store.transaction():
            entry = self.store.get(entry_id)
        if entry is None:
            raise NotFound()
        if not caller.is_teacher and entry.class_id != caller.class_id:
            raise NotFound()
        return entry
