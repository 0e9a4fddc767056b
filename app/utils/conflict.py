# app/utils/conflict.py
from dataclasses import dataclass, fields
from datetime import datetime, time
from typing import Mapping, Optional, Tuple, Union

from app.errors import InvalidRange, InvalidWeekdays

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")

_TIME_FORMATS = ("%H:%M", "%H:%M:%S")


@dataclass(frozen=True)
class TimeRange:
    """[start, end) on a 24h clock."""

    start: time
    end: time


@dataclass(frozen=True)
class WeekdaySet:
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False

    @classmethod
    def from_flags(cls, flags: Mapping[str, object]) -> "WeekdaySet":
        return cls(**{day: bool(flags.get(day)) for day in WEEKDAYS})

    def active_days(self) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(self) if getattr(self, f.name))

    def as_dict(self) -> dict:
        return {day: getattr(self, day) for day in WEEKDAYS}

    def __bool__(self) -> bool:
        return bool(self.active_days())


def parse_time(raw: Union[str, time, None]) -> time:
    """
    "08:15" / "08:15:00" / time(8, 15) -> time(8, 15)
    """
    if isinstance(raw, time):
        return raw
    s = (raw or "").strip() if isinstance(raw, str) else ""
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(s, fmt).time()
        except ValueError:
            continue
    raise InvalidRange(f"Invalid time of day: {raw!r}")


def normalize(
    raw_start: Union[str, time, None],
    raw_end: Union[str, time, None],
    raw_flags: Union[Mapping[str, object], WeekdaySet],
) -> Tuple[TimeRange, WeekdaySet]:
    """
    Parse and validate a time range plus weekday flags.

    An entry without any active day is rejected before its times are looked
    at, so it is always ``InvalidWeekdays`` whatever the times are.
    """
    weekdays = raw_flags if isinstance(raw_flags, WeekdaySet) else WeekdaySet.from_flags(raw_flags)
    if not weekdays:
        raise InvalidWeekdays()

    start = parse_time(raw_start)
    end = parse_time(raw_end)
    if start >= end:
        raise InvalidRange(f"Start time {start:%H:%M} must be before end time {end:%H:%M}")
    return TimeRange(start, end), weekdays


def overlaps(a: TimeRange, b: TimeRange) -> bool:
    # touching endpoints (a.end == b.start) are not an overlap
    return a.start < b.end and b.start < a.end


def shares_weekday(a: WeekdaySet, b: WeekdaySet) -> bool:
    return any(getattr(a, day) and getattr(b, day) for day in WEEKDAYS)


def conflicts(a, b) -> bool:
    """
    a, b: anything with ``time_range`` and ``weekdays`` (drafts or stored rows)

    Same slot = 1. share at least one weekday
                2. time ranges overlap
    """
    return overlaps(a.time_range, b.time_range) and shares_weekday(a.weekdays, b.weekdays)


@dataclass(frozen=True)
class EntryDraft:
    """A validated entry that has not been persisted (yet)."""

    class_id: str
    room: str
    subject: str
    time_range: TimeRange
    weekdays: WeekdaySet
    id: Optional[int] = None

    def to_columns(self) -> dict:
        return {
            "class_id": self.class_id,
            "room": self.room,
            "subject": self.subject,
            "start_time": self.time_range.start,
            "end_time": self.time_range.end,
            **self.weekdays.as_dict(),
        }
