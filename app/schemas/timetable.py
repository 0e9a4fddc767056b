from datetime import time
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class EntryIn(BaseModel):
    """
    Fields are optional on purpose: the service reports missing ones
    as MissingFields and bad times as InvalidRange, not as 422s.
    Times are "HH:MM" or "HH:MM:SS".
    """
    class_id: Optional[str] = Field(default=None, max_length=10, description="e.g. 1A")
    room: Optional[str] = Field(default=None, max_length=20, description="e.g. A301")
    subject: Optional[str] = Field(default=None, max_length=50)
    start_time: Optional[str] = Field(default=None, description="HH:MM")
    end_time: Optional[str] = Field(default=None, description="HH:MM")
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False


class EntryUpdate(BaseModel):
    class_id: Optional[str] = Field(default=None, max_length=10)
    room: Optional[str] = Field(default=None, max_length=20)
    subject: Optional[str] = Field(default=None, max_length=50)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    monday: Optional[bool] = None
    tuesday: Optional[bool] = None
    wednesday: Optional[bool] = None
    thursday: Optional[bool] = None
    friday: Optional[bool] = None


class EntryOut(BaseModel):
    id: int
    teacher: Optional[str] = None
    teacher_id: int = Field(validation_alias="owner_id")
    class_id: str
    start_time: time
    end_time: time
    monday: bool
    tuesday: bool
    wednesday: bool
    thursday: bool
    friday: bool
    subject: str
    room: str

    model_config = ConfigDict(from_attributes=True)


class EntryCreated(BaseModel):
    message: str
    id: int
