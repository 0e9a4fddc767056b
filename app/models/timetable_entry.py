from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base
from app.models.user import User
from app.utils.conflict import TimeRange, WeekdaySet


class TimetableEntry(Base):
    __tablename__ = "timetable_entries"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    class_id = Column(String(10), nullable=False, index=True)
    room = Column(String(20), nullable=False, index=True)
    subject = Column(String(50), nullable=False)

    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    monday = Column(Boolean, nullable=False, default=False)
    tuesday = Column(Boolean, nullable=False, default=False)
    wednesday = Column(Boolean, nullable=False, default=False)
    thursday = Column(Boolean, nullable=False, default=False)
    friday = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    owner = relationship(User)

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_timetable_entries_range"),
        Index("ix_timetable_entries_time", "start_time", "end_time"),
    )

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)

    @property
    def weekdays(self) -> WeekdaySet:
        return WeekdaySet(
            monday=bool(self.monday),
            tuesday=bool(self.tuesday),
            wednesday=bool(self.wednesday),
            thursday=bool(self.thursday),
            friday=bool(self.friday),
        )

    @property
    def teacher(self):
        return self.owner.username if self.owner is not None else None

    def __repr__(self):
        return f"<TimetableEntry {self.id} {self.class_id}/{self.room} {self.start_time}-{self.end_time}>"
