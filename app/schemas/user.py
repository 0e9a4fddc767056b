from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator

class UserBase(BaseModel):
    username: str = Field(min_length=1, max_length=50)

class UserCreate(UserBase):
    password: str = Field(min_length=1)
    role: Literal["teacher", "student"]
    class_id: Optional[str] = Field(default=None, max_length=10)

    @model_validator(mode="after")
    def _student_needs_class(self):
        if self.class_id is not None:
            self.class_id = self.class_id.strip() or None
        if self.role == "student" and not self.class_id:
            raise ValueError("students must belong to a class (class_id)")
        return self

class UserOut(UserBase):
    id: int
    role: str
    class_id: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)

class UserCreated(BaseModel):
    message: str
    user_id: int

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
