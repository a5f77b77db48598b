from __future__ import annotations

import calendar
import logging
import secrets
import string
import time
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import httpx

from smartsync.client.api import SmartSyncClient
from smartsync.errors import AppError

logger = logging.getLogger(__name__)

EVENT_DURATION = timedelta(hours=1)
_BASE36 = string.digits + string.ascii_lowercase


def new_task_id() -> str:
    """Client-side task id: 13 random base36 chars plus the epoch in ms."""
    prefix = "".join(secrets.choice(_BASE36) for _ in range(13))
    return f"{prefix}{int(time.time() * 1000)}"


def _parse_due(due_date: str | datetime) -> datetime:
    """Due date as an aware datetime; naive values are local wall-clock time."""
    if not isinstance(due_date, datetime):
        due_date = datetime.fromisoformat(due_date.replace("Z", "+00:00"))
    if due_date.tzinfo is None:
        due_date = due_date.astimezone()
    return due_date


class SyncCoordinator:
    """Creates tasks, mirroring them into Google Calendar when asked to."""

    def __init__(self, api: SmartSyncClient):
        self.api = api

    def add_task(
        self,
        text: str,
        *,
        priority: str = "medium",
        due_date: Optional[str] = None,
        sync_with_calendar: bool = False,
        reminder_type: str = "none",
        reminder_timing: str = "1h",
        contact_info: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a task and return what was sent to the API.

        Calendar failures only drop the event link; the task is created
        either way. Errors from the task API itself propagate.
        """
        text = text.strip()
        if not text:
            raise ValueError("task text must not be empty")

        google_event_id = None
        if sync_with_calendar and due_date:
            google_event_id = self._mirror(text, priority, due_date)

        task = {
            "id": new_task_id(),
            "text": text,
            "completed": False,
            "priority": priority,
            "dueDate": due_date or None,
            "googleEventId": google_event_id,
            "reminderType": reminder_type,
            "reminderTiming": reminder_timing,
            "contactInfo": contact_info if reminder_type != "none" else None,
        }
        self.api.create_task(task)
        return task

    def _mirror(self, text: str, priority: str, due_date: str) -> Optional[str]:
        try:
            start = _parse_due(due_date)
            event = self.api.create_calendar_event(
                summary=text,
                description=f"Priority: {priority}",
                start=start,
                end=start + EVENT_DURATION,
            )
        except (AppError, httpx.HTTPError, ValueError) as exc:
            logger.error("Failed to sync with Google Calendar: %s", exc)
            return None
        return event.get("id")

    def day_view(self, day: date) -> List[Dict[str, Any]]:
        """Merged local and remote entries for ``day``.

        A calendar that is not connected (or failing) contributes nothing.
        """
        tasks = self.api.list_tasks()
        try:
            events = self.api.calendar_events()
        except (AppError, httpx.HTTPError) as exc:
            logger.info("Calendar events unavailable: %s", exc)
            events = []
        return events_for_day(day, tasks, events)


def _day_prefix(day: date) -> str:
    return day.isoformat()[:10]


def events_for_day(day: date, tasks: Iterable[Dict[str, Any]], events: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Local tasks and remote events starting on ``day``, locals first.

    Matching is a prefix test on the stored ISO strings, so a task that was
    mirrored into the calendar shows up twice, once per origin.
    """
    prefix = _day_prefix(day)

    local = [
        {
            "id": t["id"],
            "summary": t.get("text"),
            "isLocal": True,
            "completed": bool(t.get("completed")),
            "hangoutLink": None,
        }
        for t in tasks
        if t.get("dueDate") and t["dueDate"].startswith(prefix)
    ]

    remote = []
    for e in events:
        start = e.get("start") or {}
        when = start.get("dateTime") or start.get("date")
        if when and when.startswith(prefix):
            remote.append({
                "id": e.get("id"),
                "summary": e.get("summary"),
                "isLocal": False,
                "completed": False,
                "hangoutLink": e.get("hangoutLink"),
            })

    return local + remote


def month_grid(month: date) -> List[Optional[date]]:
    """Days of ``month`` with leading None padding for a Sunday-first week."""
    # calendar.weekday is Monday=0; shift so Sunday=0
    offset = (calendar.weekday(month.year, month.month, 1) + 1) % 7
    total = calendar.monthrange(month.year, month.month)[1]
    return [None] * offset + [date(month.year, month.month, d) for d in range(1, total + 1)]
