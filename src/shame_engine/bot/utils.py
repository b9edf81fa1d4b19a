"""Reusable utilities for bot handlers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Tuple

from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

from shame_engine.categories import category_label
from shame_engine.escalation import shame_level_name
from shame_engine.formatting import format_duration, progress_bar, round_half_up
from shame_engine.models import (
    Activity,
    CountdownStatus,
    GuardState,
    ProductivityReport,
    ScoreSnapshot,
    Task,
    TaskPriority,
)
from shame_engine.session import EngineSession, Evaluation
from shame_engine.time_utils import get_timezone

SCORE_BUTTON_TEXT = "📊 Score"
TASKS_BUTTON_TEXT = "📋 Tasks"
ADMIT_BUTTON_TEXT = "🏳️ Admit defeat"

FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)
DUE_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d")
PRIORITY_ALIASES = {
    "p0": TaskPriority.P0_CRITICAL,
    "p1": TaskPriority.P1_HIGH,
    "p2": TaskPriority.P2_MEDIUM,
    "p3": TaskPriority.P3_LOW,
}


class CommandArgsError(ValueError):
    """Raised when a command's arguments cannot be parsed."""


def get_main_keyboard() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=SCORE_BUTTON_TEXT), KeyboardButton(text=TASKS_BUTTON_TEXT)],
            [KeyboardButton(text=ADMIT_BUTTON_TEXT)],
        ],
        resize_keyboard=True,
    )


def parse_log_args(args: Optional[str]) -> Tuple[str, float]:
    """``/log youtube.com 45`` -> ("youtube.com", 45.0)."""

    parts = (args or "").strip().rsplit(maxsplit=1)
    if len(parts) != 2:
        raise CommandArgsError("Usage: /log <activity> <minutes>")
    title, raw_minutes = parts
    try:
        minutes = float(raw_minutes)
    except ValueError as exc:
        raise CommandArgsError(f"'{raw_minutes}' is not a number of minutes") from exc
    if minutes < 0:
        raise CommandArgsError("Minutes cannot be negative")
    return title, minutes


def parse_task_args(args: Optional[str], tz_name: str = "UTC") -> Tuple[str, TaskPriority, Optional[datetime]]:
    """``/addtask Ship report | p1 | 2026-10-20 17:00``; priority and due are optional."""

    fields = [part.strip() for part in (args or "").split("|")]
    title = fields[0] if fields else ""
    if not title:
        raise CommandArgsError("Usage: /addtask <title> | <p0-p3> | <YYYY-MM-DD [HH:MM]>")

    priority = TaskPriority.P2_MEDIUM
    if len(fields) > 1 and fields[1]:
        key = fields[1].lower()
        if key not in PRIORITY_ALIASES:
            raise CommandArgsError(f"Unknown priority '{fields[1]}', use p0..p3")
        priority = PRIORITY_ALIASES[key]

    due = None
    if len(fields) > 2 and fields[2]:
        due = _parse_due(fields[2], tz_name)
    return title, priority, due


def _parse_due(value: str, tz_name: str) -> datetime:
    for fmt in DUE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if fmt == "%Y-%m-%d":
            parsed = parsed.replace(hour=23, minute=59)
        return parsed.replace(tzinfo=get_timezone(tz_name))
    raise CommandArgsError(f"Cannot parse due date '{value}'")


def build_score_message(snapshot: ScoreSnapshot, streak_days: int) -> str:
    breakdown = snapshot.breakdown
    lines = [
        f"{shame_level_name(snapshot.shame_level)}",
        f"Score: {snapshot.score}/100 {progress_bar(snapshot.score, 100, 15)}",
        f"Trend: {snapshot.trend}",
        "",
        f"Time wasted: {breakdown.time_wasted_ratio:.0f}",
        f"Deadline pressure: {breakdown.deadline_proximity:.0f}",
        f"Tasks undone: {breakdown.task_completion_ratio:.0f}",
        f"Priority severity: {breakdown.priority_severity_penalty:.0f}",
        f"Streak: {breakdown.streak_penalty:.0f} ({streak_days} days)",
        f"Context switching: {breakdown.context_switch_penalty:.0f}",
        "",
        snapshot.summary,
    ]
    return "\n".join(lines)


def build_evaluation_message(evaluation: Evaluation) -> str:
    lines = [f"{evaluation.message.emoji} {evaluation.message.message}"]
    lines.append(f"Score: {evaluation.snapshot.score}/100 ({evaluation.snapshot.trend})")
    if evaluation.countdown.is_active:
        lines.append(f"☢️ Mom email in {evaluation.countdown.minutes_remaining} min. /cancel if you are working.")
    return "\n".join(lines)


def build_tasks_overview_message(session: EngineSession) -> str:
    now = session.clock.now()
    tasks = [task for task in session.tasks.all() if task.is_open]
    if not tasks:
        return "No open tasks. Suspicious, but fine."

    sections = [
        ("Overdue", [t for t in tasks if t.is_overdue(now)]),
        ("Upcoming", [t for t in tasks if not t.is_overdue(now) and t.due is not None]),
        ("No due date", [t for t in tasks if t.due is None]),
    ]
    lines: List[str] = ["Open tasks:"]
    for title, items in sections:
        if not items:
            continue
        lines.append(f"{title}:")
        for idx, task in enumerate(sorted(items, key=_task_sort_key), start=1):
            lines.append(f"{idx}. {_format_task_line(task)}")
        lines.append("")
    if lines[-1] == "":
        lines.pop()
    return "\n".join(lines)


def build_activity_logged_message(activity: Activity) -> str:
    return (
        f"Logged {format_duration(activity.duration_minutes)} of {activity.title} "
        f"({category_label(activity.category)})"
    )


def build_status_message(countdown: CountdownStatus, guard: GuardState, paused: bool) -> str:
    lines = ["⏸️ Engine paused" if paused else "👁️ Engine armed"]
    if not countdown.configured:
        lines.append("Mom email: not configured")
    elif countdown.is_active:
        lines.append(f"☢️ Mom email countdown: {countdown.minutes_remaining} min left")
    else:
        lines.append("Mom email countdown: inactive")
    lines.append(f"Warnings issued: {countdown.warnings_sent}")
    lines.append(f"Work hours: {'yes' if guard.is_work_hours else 'no'}")
    lines.append(f"Pause allowed: {'yes' if guard.can_disable else 'no'}")
    if guard.required_tasks:
        lines.append("Blocking tasks: " + ", ".join(guard.required_tasks))
    lines.append(f"Disable attempts (last hour): {guard.disable_attempts}")
    return "\n".join(lines)


def build_report_message(report: ProductivityReport) -> str:
    lines = [
        f"📋 {report.period.capitalize()} report",
        f"Average score: {round_half_up(report.average_score)}/100 (best {report.best_score}, worst {report.worst_score})",
        f"Tasks completed: {report.total_tasks_completed}, overdue: {report.total_tasks_overdue}",
        f"Productive: {format_duration(report.total_minutes_productive)}",
        f"Wasted: {format_duration(report.total_minutes_wasted)}",
    ]
    for idx, item in enumerate(report.top_procrastination_activities[:5], start=1):
        lines.append(f"{idx}. {item.activity} - {format_duration(item.total_minutes)} ({item.occurrences}x)")
    return "\n".join(lines)


def _task_sort_key(task: Task):
    return (task.priority, task.due or FAR_FUTURE, task.title.lower())


def _format_task_line(task: Task) -> str:
    due_text = task.due.strftime("%Y-%m-%d %H:%M") if task.due else "no due date"
    return f"[P{int(task.priority)}] {task.title} ({due_text}) id={task.id}"


__all__ = [
    "SCORE_BUTTON_TEXT",
    "TASKS_BUTTON_TEXT",
    "ADMIT_BUTTON_TEXT",
    "CommandArgsError",
    "get_main_keyboard",
    "parse_log_args",
    "parse_task_args",
    "build_score_message",
    "build_evaluation_message",
    "build_tasks_overview_message",
    "build_activity_logged_message",
    "build_status_message",
    "build_report_message",
]
