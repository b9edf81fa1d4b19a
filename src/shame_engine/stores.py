"""In-memory activity log, task store and context-switch counter."""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from shame_engine.categories import classify_activity
from shame_engine.models import Activity, ActivitySource, Task, TaskPriority
from shame_engine.time_utils import Clock, SystemClock, as_aware, start_of_day

SWITCH_WINDOW = timedelta(hours=1)


class ContextSwitchCounter:
    """Counts descriptor changes inside a rolling one-hour counting window."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self._count = 0
        self._window_started = self.clock.now()
        self._last_descriptor: Optional[str] = None

    def track(self, descriptor: str) -> None:
        self._roll_window()
        if self._last_descriptor is not None and self._last_descriptor != descriptor:
            self._count += 1
        self._last_descriptor = descriptor

    @property
    def count(self) -> int:
        self._roll_window()
        return self._count

    def _roll_window(self) -> None:
        now = self.clock.now()
        if now - self._window_started > SWITCH_WINDOW:
            self._count = 0
            self._window_started = now


class ActivityLog:
    """Append-only activity log, deduplicated by activity id."""

    def __init__(self, clock: Optional[Clock] = None, switches: Optional[ContextSwitchCounter] = None):
        self.clock = clock or SystemClock()
        self.switches = switches or ContextSwitchCounter(self.clock)
        self._activities: List[Activity] = []
        self._ids: set[str] = set()

    def store(self, activities: Iterable[Activity]) -> List[Activity]:
        added: List[Activity] = []
        for activity in activities:
            if activity.id in self._ids:
                continue
            self._ids.add(activity.id)
            self._activities.append(activity)
            self.switches.track(activity.descriptor)
            added.append(activity)
        return added

    def log(
        self,
        title: str,
        duration_minutes: float,
        *,
        source: ActivitySource = "manual",
        url: Optional[str] = None,
        app_name: Optional[str] = None,
    ) -> Activity:
        """Record a manually reported activity, classifying it on the way in."""

        descriptor = url or app_name or title
        activity = Activity(
            id=f"manual-{uuid.uuid4().hex}",
            timestamp=self.clock.now(),
            duration_minutes=duration_minutes,
            source=source,
            category=classify_activity(descriptor),
            title=title,
            url=url,
            app_name=app_name,
        )
        self.store([activity])
        return activity

    def all(self) -> List[Activity]:
        return list(self._activities)

    def today(self) -> List[Activity]:
        midnight = start_of_day(self.clock.now())
        return [activity for activity in self._activities if activity.timestamp >= midnight]


class TaskStore:
    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self._tasks: Dict[str, Task] = {}

    def add(
        self,
        title: str,
        priority: TaskPriority = TaskPriority.P2_MEDIUM,
        due: Optional[datetime] = None,
    ) -> Task:
        now = self.clock.now()
        task = Task(
            id=f"manual-{uuid.uuid4().hex[:8]}",
            title=title,
            source="manual",
            priority=priority,
            status="todo",
            due=as_aware(due) if due else None,
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return task

    def upsert(self, tasks: Iterable[Task]) -> None:
        for task in tasks:
            self._tasks[task.id] = task

    def get(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def complete(self, task_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        task.status = "done"
        task.updated_at = self.clock.now()
        return task

    def refresh_overdue(self) -> List[Task]:
        """Flip open tasks whose due date has passed to ``overdue``."""

        now = self.clock.now()
        flipped: List[Task] = []
        for task in self._tasks.values():
            if task.status in ("todo", "in_progress") and task.due is not None and task.due < now:
                task.status = "overdue"
                task.updated_at = now
                flipped.append(task)
        return flipped

    def all(self) -> List[Task]:
        return list(self._tasks.values())


__all__ = ["ContextSwitchCounter", "ActivityLog", "TaskStore"]
