from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import get_db, store_errors
from app.errors import Duplicate, Unauthenticated
from app.utils.hashing import hash_password, verify_password
from app.utils.auth import Caller, create_access_token, get_caller
from app.schemas.user import TokenOut, UserCreate, UserCreated, UserOut
from app.models.user import User

import logging
logger = logging.getLogger("app.auth")


router = APIRouter(prefix="/api", tags=["Auth"])


# 註冊
@router.post("/register", response_model=UserCreated, status_code=201)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    with store_errors(db, "register"):
        exists = db.query(User.id).filter(User.username == user_data.username).first()
        if exists:
            raise Duplicate()

        new_user = User(
            username=user_data.username,
            password_hash=hash_password(user_data.password),
            role=user_data.role,
            class_id=user_data.class_id if user_data.role == "student" else None,
        )
        db.add(new_user)
        try:
            db.commit()
        except IntegrityError:
            # lost a race on the unique username
            db.rollback()
            raise Duplicate()
        db.refresh(new_user)

    logger.info("Registered %s (%s)", new_user.username, new_user.role)
    return UserCreated(message="User created successfully", user_id=new_user.id)


# 登入
@router.post("/login", response_model=TokenOut)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    with store_errors(db, "login"):
        user = db.query(User).filter(User.username == form_data.username).first()
    if not user or not verify_password(form_data.password, user.password_hash):
        logger.warning("Failed login for %s", form_data.username)
        raise Unauthenticated("Invalid credentials")

    token = create_access_token({
        "sub": user.username,
        "id": user.id,
        "role": user.role,
        "class_id": user.class_id,
    })
    return TokenOut(access_token=token, user=UserOut.model_validate(user))


# 取得使用者資料
@router.get("/me", response_model=UserOut)
def get_me(caller: Caller = Depends(get_caller)):
    return UserOut(id=caller.id, username=caller.username, role=caller.role, class_id=caller.class_id)
