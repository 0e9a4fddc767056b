# app/seed.py
"""
Demo data: a handful of teachers and students plus a conflict-free week.

    python -m app.seed

Entries go through ScheduleService, so the seed is conflict-checked like
any other write. Existing users and entries are wiped first.
"""
import logging

from sqlalchemy.orm import Session

from app.database import Base, SessionLocal, engine
from app.logging_config import setup_logging
from app.models.timetable_entry import TimetableEntry
from app.models.user import User, ROLE_STUDENT, ROLE_TEACHER
from app.services.schedule_service import ScheduleService
from app.services.store import TimetableStore
from app.utils.auth import Caller
from app.utils.conflict import WEEKDAYS
from app.utils.hashing import hash_password

logger = logging.getLogger("app.seed")

TEACHER_PASSWORD = "teacher123"
STUDENT_PASSWORD = "student123"

TEACHERS = ["admin", "kari.nordmann", "per.hansen", "anne.olsen", "ole.berg"]

STUDENTS = [
    ("student1a.1", "1A"), ("student1a.2", "1A"), ("student1b.1", "1B"),
    ("student2a.1", "2A"), ("student2b.1", "2B"),
    ("student3a.1", "3A"), ("student3b.1", "3B"),
]

# teacher, class, start, end, days (M T W T F), subject, room
WEEK = [
    ("kari.nordmann", "1A", "08:15", "09:00", "10101", "Mathematics", "A201"),
    ("per.hansen", "1A", "09:15", "10:00", "11010", "Norwegian", "B102"),
    ("anne.olsen", "1A", "10:15", "11:00", "10101", "English", "B103"),
    ("ole.berg", "1A", "11:15", "12:00", "01010", "Science", "LAB1"),
    ("kari.nordmann", "1A", "12:45", "13:30", "10100", "Social Studies", "C201"),
    ("per.hansen", "1B", "08:15", "09:00", "01010", "Norwegian", "B102"),
    ("kari.nordmann", "1B", "09:15", "10:00", "01011", "Mathematics", "A201"),
    ("ole.berg", "1B", "10:15", "11:00", "11100", "Science", "LAB1"),
    ("anne.olsen", "1B", "11:15", "12:00", "10110", "English", "B103"),
    ("anne.olsen", "2A", "08:15", "09:00", "10101", "English", "B104"),
    ("ole.berg", "2A", "09:15", "10:00", "01011", "Chemistry", "LAB2"),
    ("kari.nordmann", "2A", "10:15", "11:00", "11100", "Mathematics R1", "A202"),
    ("per.hansen", "2B", "10:15", "11:00", "01111", "Norwegian", "B105"),
    ("kari.nordmann", "2B", "11:15", "12:00", "10101", "Mathematics S1", "A203"),
    ("ole.berg", "3A", "08:15", "09:45", "10010", "Physics", "LAB3"),
    ("anne.olsen", "3A", "10:00", "10:45", "11001", "English", "B106"),
    ("per.hansen", "3B", "12:45", "14:15", "01010", "Norwegian", "B107"),
    ("kari.nordmann", "3B", "14:30", "15:15", "10101", "Mathematics R2", "A204"),
]


def seed(db: Session) -> int:
    db.query(TimetableEntry).delete()
    db.query(User).delete()
    db.commit()

    users = {}
    for name in TEACHERS:
        users[name] = User(username=name, password_hash=hash_password(TEACHER_PASSWORD), role=ROLE_TEACHER)
    for name, class_id in STUDENTS:
        users[name] = User(
            username=name, password_hash=hash_password(STUDENT_PASSWORD),
            role=ROLE_STUDENT, class_id=class_id,
        )
    db.add_all(users.values())
    db.commit()
    logger.info("Created %d users", len(users))

    service = ScheduleService(TimetableStore(db))
    for teacher, class_id, start, end, days, subject, room in WEEK:
        fields = {
            "class_id": class_id, "room": room, "subject": subject,
            "start_time": start, "end_time": end,
            **{day: flag == "1" for day, flag in zip(WEEKDAYS, days)},
        }
        service.create_entry(fields, Caller.from_user(users[teacher]))
    logger.info("Added %d timetable entries", len(WEEK))
    return len(WEEK)


def main():
    setup_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()
    logger.info("Teachers: %s / %s", ", ".join(TEACHERS), TEACHER_PASSWORD)
    logger.info("Students: student1a.1 (1A), student2b.1 (2B) / %s", STUDENT_PASSWORD)


if __name__ == "__main__":
    main()
