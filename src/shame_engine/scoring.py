"""Procrastination score calculation, trend detection and streak memory.

score = Σ weight × factor, where every factor is normalised to 0..100:

- time wasted ratio: waste-weighted share of today's tracked minutes
- deadline proximity: worst-case pressure across pending dated tasks
- task completion: share of tasks that are overdue
- priority severity: procrastinating while P0/P1 tasks are open
- streak: consecutive calendar days that ended with a bad score
- context switches: step function of the hourly switch count
"""
from __future__ import annotations

from collections import deque
from datetime import date, datetime
from typing import Deque, Iterable, List, Optional, Sequence

from shame_engine.categories import category_waste_weight, is_wasted
from shame_engine.formatting import clamp, format_duration, round_half_up
from shame_engine.logging_utils import LOGGER
from shame_engine.models import (
    Activity,
    ScoreBreakdown,
    ScoreHistoryEntry,
    ScoreSnapshot,
    ShameLevel,
    Task,
    TaskPriority,
    Trend,
)
from shame_engine.time_utils import Clock, SystemClock

SCORE_WEIGHTS = {
    "time_wasted_ratio": 0.35,
    "deadline_proximity": 0.25,
    "task_completion_ratio": 0.15,
    "priority_severity_penalty": 0.10,
    "streak_penalty": 0.10,
    "context_switch_penalty": 0.05,
}

# Inclusive upper bound of each level's score band.
SHAME_BANDS = (
    (20, ShameLevel.GENTLE_NUDGE),
    (40, ShameLevel.PASSIVE_AGGRESSIVE),
    (60, ShameLevel.DIRECT_CALLOUT),
    (80, ShameLevel.AGGRESSIVE_SHAME),
)

# (hours until due, pressure); first tier whose bound is not reached applies.
DEADLINE_TIERS = (
    (0, 100.0),
    (1, 95.0),
    (4, 80.0),
    (24, 60.0),
    (72, 40.0),
    (168, 20.0),
)
FAR_DEADLINE_PRESSURE = 5.0

PRIORITY_MULTIPLIERS = {
    TaskPriority.P0_CRITICAL: 1.5,
    TaskPriority.P1_HIGH: 1.3,
    TaskPriority.P2_MEDIUM: 1.0,
    TaskPriority.P3_LOW: 0.7,
}

# (max switches, penalty)
CONTEXT_SWITCH_STEPS = ((5, 0.0), (10, 20.0), (20, 50.0), (30, 75.0))

NO_ACTIVITY_WASTE_RATIO = 50.0
STREAK_POINTS_PER_DAY = 15
BAD_DAY_THRESHOLD = 50
HISTORY_LIMIT = 1000
TREND_WINDOW = 5
TREND_MIN_HISTORY = 3
TREND_TOLERANCE = 5


def score_to_shame_level(score: int) -> ShameLevel:
    for upper, level in SHAME_BANDS:
        if score <= upper:
            return level
    return ShameLevel.NUCLEAR_OPTION


def time_wasted_ratio(activities: Sequence[Activity]) -> float:
    if not activities:
        return NO_ACTIVITY_WASTE_RATIO
    total = sum(activity.duration_minutes for activity in activities)
    if total == 0:
        return NO_ACTIVITY_WASTE_RATIO
    wasted = sum(
        activity.duration_minutes * category_waste_weight(activity.category)
        for activity in activities
    )
    return clamp(wasted / total * 100, 0, 100)


def deadline_pressure(hours_until_due: float) -> float:
    for bound, pressure in DEADLINE_TIERS:
        if hours_until_due < bound:
            return pressure
    return FAR_DEADLINE_PRESSURE


def deadline_proximity(tasks: Iterable[Task], now: datetime) -> float:
    worst = 0.0
    for task in tasks:
        if task.is_done or task.due is None:
            continue
        hours = (task.due - now).total_seconds() / 3600
        pressure = deadline_pressure(hours) * PRIORITY_MULTIPLIERS[task.priority]
        worst = max(worst, pressure)
    return clamp(worst, 0, 100)


def task_completion_ratio(tasks: Sequence[Task], now: datetime) -> float:
    if not tasks:
        return 0.0
    overdue = sum(1 for task in tasks if task.is_overdue(now))
    return clamp(overdue / len(tasks) * 100, 0, 100)


def priority_severity_penalty(tasks: Sequence[Task], activities: Sequence[Activity]) -> float:
    urgent_open = [
        task
        for task in tasks
        if not task.is_done and task.priority <= TaskPriority.P1_HIGH
    ]
    if not urgent_open:
        return 0.0
    if activities:
        wasted_ratio = sum(1 for a in activities if is_wasted(a.category)) / len(activities)
    else:
        wasted_ratio = 0.0
    critical_count = sum(1 for task in urgent_open if task.priority == TaskPriority.P0_CRITICAL)
    return clamp(wasted_ratio * 100 * (1 + 0.3 * critical_count), 0, 100)


def context_switch_penalty(switches: int) -> float:
    for limit, penalty in CONTEXT_SWITCH_STEPS:
        if switches <= limit:
            return penalty
    return 100.0


class ScoreCalculator:
    """Stateful scorer: keeps the rolling history and the bad-day streak."""

    def __init__(self, clock: Optional[Clock] = None, history_limit: int = HISTORY_LIMIT):
        self.clock = clock or SystemClock()
        self._history: Deque[ScoreHistoryEntry] = deque(maxlen=history_limit)
        self._streak_days = 0
        self._last_day_checked: Optional[date] = None

    @property
    def streak_days(self) -> int:
        return self._streak_days

    def history(self, limit: Optional[int] = None) -> List[ScoreHistoryEntry]:
        entries = list(self._history)
        if limit is not None:
            return entries[-limit:] if limit > 0 else []
        return entries

    def calculate(
        self,
        activities: Sequence[Activity],
        tasks: Sequence[Task],
        context_switches: int = 0,
    ) -> ScoreSnapshot:
        now = self.clock.now()
        breakdown = ScoreBreakdown(
            time_wasted_ratio=time_wasted_ratio(activities),
            deadline_proximity=deadline_proximity(tasks, now),
            task_completion_ratio=task_completion_ratio(tasks, now),
            priority_severity_penalty=priority_severity_penalty(tasks, activities),
            streak_penalty=clamp(self._streak_days * STREAK_POINTS_PER_DAY, 0, 100),
            context_switch_penalty=context_switch_penalty(context_switches),
        )
        raw = sum(getattr(breakdown, name) * weight for name, weight in SCORE_WEIGHTS.items())
        # Trim float noise so x.5 sums always round up.
        score = int(clamp(round_half_up(round(raw, 6)), 0, 100))
        level = score_to_shame_level(score)
        trend = self._trend(score)

        self._history.append(ScoreHistoryEntry(score=score, timestamp=now))
        self._update_streak(score, now)

        LOGGER.info("Score calculated | score=%s level=%s trend=%s", score, int(level), trend)
        return ScoreSnapshot(
            score=score,
            shame_level=level,
            breakdown=breakdown,
            trend=trend,
            calculated_at=now,
            summary=self._summary(score, activities, tasks, now),
        )

    def reset_score(self) -> None:
        """Admit defeat: clear the streak and record a synthetic zero."""

        self._streak_days = 0
        self._history.append(ScoreHistoryEntry(score=0, timestamp=self.clock.now()))
        LOGGER.info("Score reset by user")

    def _trend(self, score: int) -> Trend:
        if len(self._history) < TREND_MIN_HISTORY:
            return "stable"
        recent = list(self._history)[-TREND_WINDOW:]
        average = sum(entry.score for entry in recent) / len(recent)
        if score < average - TREND_TOLERANCE:
            return "improving"
        if score > average + TREND_TOLERANCE:
            return "worsening"
        return "stable"

    def _update_streak(self, score: int, now: datetime) -> None:
        today = now.date()
        if today == self._last_day_checked:
            return
        self._last_day_checked = today
        if score >= BAD_DAY_THRESHOLD:
            self._streak_days += 1
        else:
            self._streak_days = 0

    def _summary(
        self,
        score: int,
        activities: Sequence[Activity],
        tasks: Sequence[Task],
        now: datetime,
    ) -> str:
        parts = [f"Procrastination Score: {score}/100"]
        blatant = sorted(
            (a for a in activities if a.category == "blatant_procrastination"),
            key=lambda a: a.duration_minutes,
            reverse=True,
        )
        wasted_minutes = sum(a.duration_minutes for a in blatant)
        if wasted_minutes > 0:
            parts.append(f"Time wasted: {format_duration(wasted_minutes)}")
        overdue = sum(1 for task in tasks if task.is_overdue(now))
        if overdue:
            parts.append(f"Overdue tasks: {overdue}")
        if self._streak_days > 1:
            parts.append(f"Procrastination streak: {self._streak_days} days 🔥")
        if blatant:
            parts.append("Top distractions: " + ", ".join(a.title for a in blatant[:3]))
        return " | ".join(parts)


__all__ = [
    "SCORE_WEIGHTS",
    "SHAME_BANDS",
    "score_to_shame_level",
    "time_wasted_ratio",
    "deadline_pressure",
    "deadline_proximity",
    "task_completion_ratio",
    "priority_severity_penalty",
    "context_switch_penalty",
    "ScoreCalculator",
]
