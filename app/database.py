import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import settings
from app.errors import Internal

logger = logging.getLogger("app.store")


def make_engine(url: str):
    connect_args = {}
    if url.startswith("sqlite"):
        # sessions are handed across FastAPI's threadpool
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_errors(db, action: str):
    """Roll back, log and turn any SQLAlchemy failure into ``Internal``."""
    try:
        yield db
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Store failure during %s, rolled back", action)
        raise Internal() from e
