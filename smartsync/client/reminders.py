from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

logger = logging.getLogger(__name__)

LOOKAHEAD = timedelta(minutes=10)
POLL_INTERVAL = 30.0


def _due_at(task: Dict[str, Any], now: datetime) -> Optional[datetime]:
    raw = task.get("dueDate")
    if not raw:
        return None
    try:
        due = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable dueDate %r on task %s", raw, task.get("id"))
        return None
    # naive timestamps are local wall-clock time, like a datetime-local input
    if due.tzinfo is None and now.tzinfo is not None:
        due = due.astimezone()
    elif due.tzinfo is not None and now.tzinfo is None:
        due = due.astimezone().replace(tzinfo=None)
    return due


class ReminderWatcher:
    """
    Notifies about incomplete tasks falling due within the next ten minutes.

    Each task is notified at most once per watcher; the notified set lives in
    memory only, so a fresh watcher notifies again.
    """

    def __init__(self, lookahead: timedelta = LOOKAHEAD):
        self.lookahead = lookahead
        self.notified: Set[str] = set()

    def check(self, tasks: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        now = now or datetime.now()
        horizon = now + self.lookahead
        due_soon = []
        for task in tasks:
            if task.get("completed") or task.get("id") in self.notified:
                continue
            due = _due_at(task, now)
            if due is None:
                continue
            if now < due <= horizon:
                self.notified.add(task["id"])
                due_soon.append(task)
        return due_soon

    def run(
        self,
        fetch_tasks: Callable[[], Iterable[Dict[str, Any]]],
        notify: Callable[[Dict[str, Any]], None],
        stop: threading.Event,
        interval: float = POLL_INTERVAL,
    ) -> None:
        """Poll every ``interval`` seconds until ``stop`` is set; checks once immediately."""
        while not stop.is_set():
            for task in self.check(fetch_tasks()):
                logger.info("Task %s is due soon", task.get("id"))
                notify(task)
            stop.wait(interval)
