"""Productivity report aggregation for daily posts and the nuclear email."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Sequence

from shame_engine.categories import is_wasted
from shame_engine.models import (
    Activity,
    ActivityTotal,
    ProductivityReport,
    ReportPeriod,
    ScoreHistoryEntry,
    Task,
)
from shame_engine.scoring import score_to_shame_level

TOP_ACTIVITY_LIMIT = 10


def generate_report(
    activities: Sequence[Activity],
    tasks: Sequence[Task],
    scores: Sequence[ScoreHistoryEntry],
    now: datetime,
    period: ReportPeriod = "daily",
) -> ProductivityReport:
    wasted = [a for a in activities if is_wasted(a.category)]
    productive = [a for a in activities if not is_wasted(a.category)]

    groups: Dict[str, ActivityTotal] = {}
    for activity in wasted:
        total = groups.setdefault(
            activity.title, ActivityTotal(activity=activity.title, total_minutes=0, occurrences=0)
        )
        total.total_minutes += activity.duration_minutes
        total.occurrences += 1
    top = sorted(groups.values(), key=lambda item: item.total_minutes, reverse=True)

    values = [entry.score for entry in scores]
    distribution = {level: 0 for level in range(1, 6)}
    for value in values:
        distribution[int(score_to_shame_level(value))] += 1

    return ProductivityReport(
        period=period,
        start=scores[0].timestamp if scores else now,
        end=now,
        average_score=sum(values) / len(values) if values else 0.0,
        worst_score=max(values) if values else 0,
        best_score=min(values) if values else 0,
        total_tasks_completed=sum(1 for task in tasks if task.is_done),
        total_tasks_overdue=sum(1 for task in tasks if task.is_overdue(now)),
        total_minutes_productive=sum(a.duration_minutes for a in productive),
        total_minutes_wasted=sum(a.duration_minutes for a in wasted),
        top_procrastination_activities=top[:TOP_ACTIVITY_LIMIT],
        shame_level_distribution=distribution,
    )


__all__ = ["generate_report"]
