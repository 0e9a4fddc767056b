# app/services/store.py
import zlib
from contextlib import contextmanager
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.orm import Session, joinedload

from app.database import store_errors
from app.models.timetable_entry import TimetableEntry
from app.utils.conflict import WEEKDAYS


UPDATABLE_FIELDS = (
    "class_id", "room", "subject", "start_time", "end_time",
    "monday", "tuesday", "wednesday", "thursday", "friday",
)


def scope_key(scope: Tuple[str, str]) -> int:
    """("class", "1A") -> stable signed 32-bit key for pg advisory locks"""
    raw = zlib.crc32(f"{scope[0]}:{scope[1]}".encode("utf-8"))
    return raw - (1 << 32) if raw >= (1 << 31) else raw


class TimetableStore:
    """
    Durable timetable entries on top of one SQLAlchemy session.

    Reads re-populate already loaded rows so a check running after another
    writer's commit never works from a stale identity map.
    """

    def __init__(self, db: Session):
        self.db = db

    def _entries(self):
        return self.db.query(TimetableEntry).execution_options(populate_existing=True)

    def _scope(self, column, value: str, exclude_id: Optional[int]) -> List[TimetableEntry]:
        q = self._entries().filter(column == value)
        if exclude_id is not None:
            q = q.filter(TimetableEntry.id != exclude_id)
        return q.order_by(TimetableEntry.id.asc()).all()

    def fetch_by_class(self, class_id: str, exclude_id: Optional[int] = None) -> List[TimetableEntry]:
        return self._scope(TimetableEntry.class_id, class_id, exclude_id)

    def fetch_by_room(self, room: str, exclude_id: Optional[int] = None) -> List[TimetableEntry]:
        return self._scope(TimetableEntry.room, room, exclude_id)

    def get(self, entry_id: int) -> Optional[TimetableEntry]:
        return self._entries().filter(TimetableEntry.id == entry_id).first()

    def list(self, class_id: Optional[str] = None, weekday: Optional[str] = None) -> List[TimetableEntry]:
        q = self._entries().options(joinedload(TimetableEntry.owner))
        if class_id:
            q = q.filter(TimetableEntry.class_id == class_id)
        if weekday:
            if weekday not in WEEKDAYS:
                raise ValueError(f"unknown weekday {weekday!r}")
            q = q.filter(getattr(TimetableEntry, weekday).is_(True))
        return q.order_by(
            TimetableEntry.class_id.asc(),
            TimetableEntry.start_time.asc(),
            TimetableEntry.id.asc(),
        ).all()

    def insert(self, owner_id: int, columns: dict) -> int:
        entry = TimetableEntry(owner_id=owner_id, **columns)
        self.db.add(entry)
        self.db.flush()
        return entry.id

    def update(self, entry_id: int, columns: dict) -> int:
        values = {k: v for k, v in columns.items() if k in UPDATABLE_FIELDS}
        return (
            self.db.query(TimetableEntry)
            .filter(TimetableEntry.id == entry_id)
            .update(values, synchronize_session="fetch")
        )

    def delete(self, entry_id: int) -> int:
        return (
            self.db.query(TimetableEntry)
            .filter(TimetableEntry.id == entry_id)
            .delete(synchronize_session="fetch")
        )

    def lock_scopes(self, scopes: Iterable[Tuple[str, str]]) -> None:
        """
        Serialize writers across processes on PostgreSQL.
        Transaction scoped: released by the commit/rollback of transaction().
        """
        if self.db.get_bind().dialect.name != "postgresql":
            return
        for key in sorted(scope_key(s) for s in set(scopes)):
            self.db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": key})

    @contextmanager
    def transaction(self):
        """
        Commit on success, roll back on any error.
        Store failures come out as ``Internal``; nothing is retried here.

        Whatever the session already had open (e.g. the caller lookup) is
        finished first, so the checks see a snapshot taken after the scope
        locks, under any isolation level.
        """
        with store_errors(self.db, "timetable transaction"):
            if self.db.in_transaction():
                self.db.commit()
            try:
                yield self
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
