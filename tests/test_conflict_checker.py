"""Conflict checker against an in-memory store (no database)."""

from dataclasses import replace

from app.services.conflict_checker import NO_CONFLICT, ConflictKind, ConflictResult, check_conflicts
from app.utils.conflict import EntryDraft, TimeRange, WeekdaySet, parse_time


def draft(class_id, room, start, end, *days, id=None):
    return EntryDraft(
        class_id=class_id,
        room=room,
        subject="Mathematics",
        time_range=TimeRange(parse_time(start), parse_time(end)),
        weekdays=WeekdaySet(**{d: True for d in days}),
        id=id,
    )


class MemoryStore:
    """Just the two scope reads the checker needs, plus a call log."""

    def __init__(self, *entries):
        self.entries = list(entries)
        self.calls = []

    def _scope(self, attr, value, exclude_id):
        return [e for e in self.entries if getattr(e, attr) == value and e.id != exclude_id]

    def fetch_by_class(self, class_id, exclude_id=None):
        self.calls.append(("class", class_id))
        return self._scope("class_id", class_id, exclude_id)

    def fetch_by_room(self, room, exclude_id=None):
        self.calls.append(("room", room))
        return self._scope("room", room, exclude_id)


def test_empty_store_has_no_conflict():
    store = MemoryStore()
    assert check_conflicts(store, draft("1A", "A301", "08:00", "09:00", "monday")) == NO_CONFLICT
    assert store.calls == [("class", "1A"), ("room", "A301")]


def test_class_conflict_reports_colliding_entry():
    store = MemoryStore(draft("1A", "A301", "08:00", "09:00", "monday", id=7))
    candidate = draft("1A", "B102", "08:30", "09:30", "monday", "wednesday")

    result = check_conflicts(store, candidate)

    assert result == ConflictResult(ConflictKind.CLASS, 7)
    assert result


def test_room_conflict_for_other_class():
    store = MemoryStore(draft("1A", "A301", "08:00", "09:00", "monday", id=3))
    candidate = draft("2B", "A301", "08:30", "09:30", "monday", "wednesday")

    assert check_conflicts(store, candidate) == ConflictResult(ConflictKind.ROOM, 3)


def test_class_scope_wins_and_room_scope_is_not_read():
    store = MemoryStore(
        draft("1A", "Z999", "08:00", "09:00", "monday", id=1),
        draft("3C", "A301", "08:00", "09:00", "monday", id=2),
    )
    candidate = draft("1A", "A301", "08:00", "09:00", "monday")

    assert check_conflicts(store, candidate) == ConflictResult(ConflictKind.CLASS, 1)
    assert store.calls == [("class", "1A")]


def test_identical_entry_is_a_conflict_not_an_upsert():
    existing = draft("1A", "A301", "08:00", "09:00", "monday", id=5)
    store = MemoryStore(existing)

    result = check_conflicts(store, replace(existing, id=None))

    assert result.kind is ConflictKind.CLASS
    assert result.entry_id == 5


def test_entry_never_conflicts_with_itself_when_excluded():
    existing = draft("1A", "A301", "08:00", "09:00", "monday", id=5)
    store = MemoryStore(existing)

    assert check_conflicts(store, existing, exclude_id=5) == NO_CONFLICT


def test_adjacent_and_other_day_entries_pass():
    store = MemoryStore(
        draft("1A", "A301", "08:15", "09:00", "monday", id=1),
        draft("1A", "A301", "09:45", "10:30", "monday", id=2),
        draft("1A", "A301", "09:00", "09:45", "tuesday", id=3),
    )
    candidate = draft("1A", "A301", "09:00", "09:45", "monday")

    assert check_conflicts(store, candidate) == NO_CONFLICT


def test_first_colliding_entry_in_scope_is_reported():
    store = MemoryStore(
        draft("1A", "A301", "08:00", "08:45", "friday", id=4),
        draft("1A", "A302", "08:30", "09:15", "friday", id=9),
    )
    candidate = draft("1A", "B200", "08:00", "10:00", "friday")

    assert check_conflicts(store, candidate).entry_id == 4
