"""Shared fixtures: a throwaway SQLite database per test session."""

import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="timetable-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmp, "test.db")
os.environ["LOG_DIR"] = os.path.join(_tmp, "logs")
os.environ["JWT_SECRET"] = "test-secret"

import pytest

from app.database import Base, SessionLocal, engine
from app.models.timetable_entry import TimetableEntry  # noqa: F401
from app.models.user import User, ROLE_STUDENT, ROLE_TEACHER
from app.services.locks import ScopeLocks
from app.services.schedule_service import ScheduleService
from app.services.store import TimetableStore
from app.utils.auth import Caller


# ─── Helpers ──────────────────────────────────────────────────────────────────

def entry_fields(class_id="1A", room="A301", start="08:00", end="09:00", days=("monday",), subject="Mathematics"):
    fields = {
        "class_id": class_id,
        "room": room,
        "subject": subject,
        "start_time": start,
        "end_time": end,
    }
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday"):
        fields[day] = day in days
    return fields


def add_user(db, username, role, class_id=None) -> User:
    # hashing is irrelevant outside the login tests
    user = User(username=username, password_hash="!", role=role, class_id=class_id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# ─── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def teacher(db) -> Caller:
    return Caller.from_user(add_user(db, "kari.nordmann", ROLE_TEACHER))


@pytest.fixture
def other_teacher(db) -> Caller:
    return Caller.from_user(add_user(db, "per.hansen", ROLE_TEACHER))


@pytest.fixture
def student(db) -> Caller:
    return Caller.from_user(add_user(db, "student1a.1", ROLE_STUDENT, class_id="1A"))


@pytest.fixture
def service(db) -> ScheduleService:
    return ScheduleService(TimetableStore(db), locks=ScopeLocks())
