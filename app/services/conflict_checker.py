# app/services/conflict_checker.py
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from app.utils.conflict import conflicts

logger = logging.getLogger("app.schedule")


class ConflictKind(str, enum.Enum):
    NONE = "NoConflict"
    CLASS = "ClassConflict"
    ROOM = "RoomConflict"


@dataclass(frozen=True)
class ConflictResult:
    kind: ConflictKind
    entry_id: Optional[int] = None

    def __bool__(self) -> bool:
        return self.kind is not ConflictKind.NONE


NO_CONFLICT = ConflictResult(ConflictKind.NONE)


def _first_hit(candidate, existing):
    for e in existing:
        if conflicts(candidate, e):
            return e
    return None


def check_conflicts(store, candidate, exclude_id: Optional[int] = None) -> ConflictResult:
    """
    candidate: validated draft (class_id, room, time_range, weekdays)
    exclude_id: id of the entry being updated, never conflicts with itself

    Class scope first, then room scope. If both would collide the class
    conflict is reported. Read-only.
    """
    hit = _first_hit(candidate, store.fetch_by_class(candidate.class_id, exclude_id))
    if hit is not None:
        logger.info("Class conflict: class=%s collides with entry %s", candidate.class_id, hit.id)
        return ConflictResult(ConflictKind.CLASS, hit.id)

    hit = _first_hit(candidate, store.fetch_by_room(candidate.room, exclude_id))
    if hit is not None:
        logger.info("Room conflict: room=%s collides with entry %s", candidate.room, hit.id)
        return ConflictResult(ConflictKind.ROOM, hit.id)

    return NO_CONFLICT
