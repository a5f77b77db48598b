from sqlalchemy import Boolean, Column, ForeignKey, String, Text
from smartsync.database import Base

PRIORITIES = ("low", "medium", "high")
REMINDER_TYPES = ("none", "email")
REMINDER_TIMINGS = ("1h", "24h")


class Task(Base):
    __tablename__ = "tasks"

    # chosen by the client, not generated here
    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    priority = Column(String, nullable=False, default="medium")
    # ISO-8601 text exactly as sent by the client
    due_date = Column(String, nullable=True)
    google_event_id = Column(String, nullable=True)
    reminder_type = Column(String, nullable=False, default="none")
    reminder_timing = Column(String, nullable=False, default="1h")
    contact_info = Column(String, nullable=False, default="")
