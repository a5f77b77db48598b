from datetime import datetime
from pydantic import BaseModel, Field, validator
from typing import Optional


class EventCreate(BaseModel):
    summary: str
    description: Optional[str] = ""
    start: datetime = Field(alias="startDateTime")
    end: datetime = Field(alias="endDateTime")

    class Config:
        populate_by_name = True

    @validator("end")
    def end_after_start(cls, v, values):
        start = values.get("start")
        if start is None or (start.tzinfo is None) != (v.tzinfo is None):
            return v
        if v < start:
            raise ValueError("endDateTime must not be before startDateTime")
        return v
