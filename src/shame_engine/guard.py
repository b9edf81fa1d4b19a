"""Anti-disable guard: decides whether the engine may be paused right now."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from shame_engine.logging_utils import log_event
from shame_engine.models import (
    DisableAttempt,
    DisableVerdict,
    GuardState,
    ReEnableAdvice,
    Task,
    TaskPriority,
)
from shame_engine.time_utils import Clock, SystemClock, as_aware, get_timezone

SUSPICIOUS_WINDOW = timedelta(hours=1)
SUSPICIOUS_ATTEMPTS = 3
RE_ENABLE_WINDOW = timedelta(minutes=30)
RE_ENABLE_ATTEMPTS = 2
MAX_LISTED_TASKS = 3


@dataclass(slots=True, frozen=True)
class WorkCalendar:
    start_hour: int = 9
    end_hour: int = 17
    # 0=Sunday .. 6=Saturday
    work_days: Tuple[int, ...] = (1, 2, 3, 4, 5)
    timezone: str = "UTC"
    focus_mode: bool = False


def is_work_hours(calendar: WorkCalendar, now: datetime) -> bool:
    local = as_aware(now).astimezone(get_timezone(calendar.timezone))
    day = (local.weekday() + 1) % 7
    return day in calendar.work_days and calendar.start_hour <= local.hour < calendar.end_hour


class DisableGuard:
    """Owns the disable-attempt log; every attempt is recorded before it is judged."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self._attempts: List[DisableAttempt] = []

    def attempts(self) -> List[DisableAttempt]:
        return list(self._attempts)

    def record_attempt(self, at: Optional[datetime] = None, reason: Optional[str] = None) -> DisableAttempt:
        attempt = DisableAttempt(timestamp=as_aware(at) if at else self.clock.now(), reason=reason)
        self._attempts.append(attempt)
        log_event(
            {
                "status": "info",
                "kind": "disable_attempt",
                "reason": reason,
                "total_attempts": len(self._attempts),
            }
        )
        return attempt

    def can_disable(self, calendar: WorkCalendar, tasks: Sequence[Task]) -> GuardState:
        now = self.clock.now()
        work_hours = is_work_hours(calendar, now)
        incomplete = [task for task in tasks if task.is_open]
        critical = [task for task in incomplete if task.priority <= TaskPriority.P1_HIGH]
        recent = self._recent(now, SUSPICIOUS_WINDOW)

        return GuardState(
            can_disable=calendar.focus_mode or not work_hours or not critical,
            is_work_hours=work_hours,
            disable_attempts=len(recent),
            last_disable_attempt=self._attempts[-1].timestamp if self._attempts else None,
            required_tasks=[task.title for task in critical],
            manager_approval_required=work_hours and bool(critical),
            suspicious_activity=len(recent) >= SUSPICIOUS_ATTEMPTS,
        )

    def attempt_disable(
        self,
        calendar: WorkCalendar,
        tasks: Sequence[Task],
        reason: Optional[str] = None,
    ) -> DisableVerdict:
        self.record_attempt(reason=reason)
        state = self.can_disable(calendar, tasks)

        if state.suspicious_activity:
            return DisableVerdict(
                allowed=False,
                message=(
                    f"🚨 SUSPICIOUS ACTIVITY DETECTED: {state.disable_attempts} disable attempts in the "
                    "last hour! This has been logged to the shame dashboard. Nice try."
                ),
            )

        if not state.can_disable:
            task_list = "\n".join(f"  • {title}" for title in state.required_tasks[:MAX_LISTED_TASKS])
            if state.manager_approval_required:
                message = (
                    "❌ Cannot disable during work hours with critical tasks pending.\n\n"
                    f"Required tasks to complete first:\n{task_list}\n\n"
                    "Or get manager approval. (Ha! Good luck explaining that one.)"
                )
            else:
                message = (
                    "❌ Nice try! You can't disable shame during work hours.\n\n"
                    f"Complete these tasks first:\n{task_list}\n\n"
                    "The Shame Engine watches. The Shame Engine knows. 👁️"
                )
            return DisableVerdict(allowed=False, message=message)

        return DisableVerdict(
            allowed=True,
            message="✅ Engine paused. But remember: the shame never truly stops. It waits. 😈",
        )

    def check_auto_re_enable(self, calendar: WorkCalendar) -> ReEnableAdvice:
        """Advisory only: the caller decides whether to re-arm the engine."""

        now = self.clock.now()
        if not is_work_hours(calendar, now):
            return ReEnableAdvice(should_re_enable=False, reason="Outside work hours")
        recent = self._recent(now, RE_ENABLE_WINDOW)
        if len(recent) >= RE_ENABLE_ATTEMPTS:
            return ReEnableAdvice(
                should_re_enable=True,
                reason=(
                    f"Suspicious: {len(recent)} disable attempts in last 30 minutes during work hours"
                ),
            )
        return ReEnableAdvice(should_re_enable=False, reason="No suspicious activity")

    def _recent(self, now: datetime, window: timedelta) -> List[DisableAttempt]:
        return [attempt for attempt in self._attempts if timedelta(0) <= now - attempt.timestamp < window]


__all__ = ["WorkCalendar", "is_work_hours", "DisableGuard"]
