import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db, store_errors
from app.errors import Forbidden, InvalidToken, Unauthenticated
from app.models.user import User, ROLE_TEACHER

logger = logging.getLogger("app.auth")

# auto_error=False: a missing token is reported as our own Unauthenticated
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login", auto_error=False)


@dataclass(frozen=True)
class Caller:
    id: int
    username: str
    role: str
    class_id: Optional[str] = None

    @property
    def is_teacher(self) -> bool:
        return self.role == ROLE_TEACHER

    @classmethod
    def from_user(cls, user: User) -> "Caller":
        return cls(id=user.id, username=user.username, role=user.role, class_id=user.class_id)


def create_access_token(data: dict, expires_minutes: Optional[int] = None):
    to_encode = data.copy()
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.utcnow() + timedelta(minutes=minutes)
    to_encode.update({"exp": expire})
    token = jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token


def resolve_caller(token: Optional[str], db: Session) -> Caller:
    if not token:
        raise Unauthenticated()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise InvalidToken()

    username = payload.get("sub")
    if username is None:
        raise InvalidToken()

    with store_errors(db, "caller lookup"):
        user = db.query(User).filter(User.username == username).first()
    if not user:
        raise InvalidToken("User not found")
    return Caller.from_user(user)


def get_caller(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Caller:
    return resolve_caller(token, db)


def require_teacher(caller: Caller) -> Caller:
    """Write capability: teachers only."""
    if not caller.is_teacher:
        logger.warning("Write denied for %s (role=%s)", caller.username, caller.role)
        raise Forbidden()
    return caller
