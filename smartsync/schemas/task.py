from datetime import datetime
from pydantic import BaseModel, Field, validator
from typing import Optional

from smartsync.models.task import PRIORITIES, REMINDER_TIMINGS, REMINDER_TYPES


class TaskCreate(BaseModel):
    id: str
    text: str
    priority: Optional[str] = "medium"
    due_date: Optional[str] = Field(None, alias="dueDate")
    google_event_id: Optional[str] = Field(None, alias="googleEventId")
    reminder_type: Optional[str] = Field("none", alias="reminderType")
    reminder_timing: Optional[str] = Field("1h", alias="reminderTiming")
    contact_info: Optional[str] = Field("", alias="contactInfo")

    class Config:
        populate_by_name = True

    @validator("id", "text")
    def not_empty(cls, v):
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @validator("priority")
    def known_priority(cls, v):
        if not v:
            return "medium"
        if v not in PRIORITIES:
            raise ValueError(f"priority must be one of {', '.join(PRIORITIES)}")
        return v

    @validator("due_date")
    def iso_due_date(cls, v):
        if not v:
            return None
        try:
            parsed = datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("dueDate must be an ISO-8601 timestamp")
        # wall-clock only, so that text order is time order
        if parsed.tzinfo is not None:
            raise ValueError("dueDate must be a local date-time without a UTC offset")
        # stored as sent so day matching on the client keeps working
        return v

    @validator("google_event_id")
    def blank_event_id(cls, v):
        return v or None

    @validator("reminder_type")
    def default_reminder_type(cls, v):
        if not v:
            return "none"
        if v not in REMINDER_TYPES:
            raise ValueError(f"reminderType must be one of {', '.join(REMINDER_TYPES)}")
        return v

    @validator("reminder_timing")
    def default_reminder_timing(cls, v):
        if not v:
            return "1h"
        if v not in REMINDER_TIMINGS:
            raise ValueError(f"reminderTiming must be one of {', '.join(REMINDER_TIMINGS)}")
        return v

    @validator("contact_info")
    def default_contact_info(cls, v):
        return v or ""


class TaskUpdate(BaseModel):
    completed: bool = False


class TaskOut(BaseModel):
    id: str
    user_id: str = Field(alias="userId")
    text: str
    completed: bool
    priority: str
    due_date: Optional[str] = Field(None, alias="dueDate")
    google_event_id: Optional[str] = Field(None, alias="googleEventId")
    reminder_type: str = Field(alias="reminderType")
    reminder_timing: str = Field(alias="reminderTiming")
    contact_info: str = Field("", alias="contactInfo")

    class Config:
        from_attributes = True
        populate_by_name = True
