from datetime import datetime, timedelta, timezone

import pytest

from shame_engine import config
from shame_engine.config import Settings
from shame_engine.models import Activity, Task, TaskPriority

# Wednesday, inside default work hours.
WORK_MORNING = datetime(2026, 10, 14, 10, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime = WORK_MORNING):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    settings = Settings(LOG_DIR=tmp_path / "logs", _env_file=None)
    monkeypatch.setattr(config, "_SETTINGS", settings)
    return settings


@pytest.fixture
def clock():
    return FrozenClock()


def make_activity(
    title: str,
    minutes: float,
    category: str = "blatant_procrastination",
    *,
    at: datetime = WORK_MORNING,
    activity_id: str | None = None,
) -> Activity:
    return Activity(
        id=activity_id or f"{title}-{minutes}-{at.isoformat()}",
        timestamp=at,
        duration_minutes=minutes,
        category=category,
        title=title,
    )


def make_task(
    title: str,
    *,
    priority: TaskPriority = TaskPriority.P2_MEDIUM,
    due: datetime | None = None,
    status: str = "todo",
    now: datetime = WORK_MORNING,
) -> Task:
    return Task(
        id=f"task-{title}",
        title=title,
        priority=priority,
        status=status,
        due=due,
        created_at=now,
        updated_at=now,
    )
