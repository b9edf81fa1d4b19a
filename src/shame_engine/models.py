"""Data models shared across the project."""
from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shame_engine.time_utils import as_aware

ActivityCategory = Literal[
    "productive",
    "productive_adjacent",
    "questionable",
    "blatant_procrastination",
]
ActivitySource = Literal["browser", "git", "editor", "app", "time_tracker", "manual"]
TaskStatus = Literal["todo", "in_progress", "done", "overdue", "abandoned"]
TaskSource = Literal["todoist", "notion", "linear", "jira", "manual"]
Trend = Literal["improving", "worsening", "stable"]
SuggestedAction = Literal["dashboard_update", "desktop_notification", "discord_post", "mom_email"]
Urgency = Literal["low", "medium", "high", "critical", "nuclear"]
ReportPeriod = Literal["daily", "weekly", "monthly"]


class TaskPriority(IntEnum):
    P0_CRITICAL = 0
    P1_HIGH = 1
    P2_MEDIUM = 2
    P3_LOW = 3


class ShameLevel(IntEnum):
    GENTLE_NUDGE = 1
    PASSIVE_AGGRESSIVE = 2
    DIRECT_CALLOUT = 3
    AGGRESSIVE_SHAME = 4
    NUCLEAR_OPTION = 5


class Activity(BaseModel):
    """A recorded user activity. Category is fixed at classification time."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    duration_minutes: float = Field(..., ge=0)
    source: ActivitySource = "manual"
    category: ActivityCategory
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    app_name: Optional[str] = None
    evidence: Optional[Dict[str, Any]] = None

    @field_validator("timestamp")
    @classmethod
    def _aware_timestamp(cls, value: datetime) -> datetime:
        return as_aware(value)

    @property
    def descriptor(self) -> str:
        """Text used for classification and context-switch tracking."""

        return self.url or self.app_name or self.title


class Task(BaseModel):
    """A tracked task from any task management source."""

    id: str
    title: str
    description: Optional[str] = None
    source: TaskSource = "manual"
    priority: TaskPriority = TaskPriority.P2_MEDIUM
    status: TaskStatus = "todo"
    due: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    estimated_minutes: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    project_name: Optional[str] = None

    @field_validator("due", "created_at", "updated_at")
    @classmethod
    def _aware_datetimes(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_aware(value) if value is not None else None

    @property
    def is_done(self) -> bool:
        return self.status == "done"

    @property
    def is_open(self) -> bool:
        return self.status not in ("done", "abandoned")

    def is_overdue(self, now: datetime) -> bool:
        # The due date wins over a stale stored status.
        if self.status == "overdue":
            return True
        return not self.is_done and self.due is not None and self.due < now


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    time_wasted_ratio: float = Field(..., ge=0, le=100)
    deadline_proximity: float = Field(..., ge=0, le=100)
    task_completion_ratio: float = Field(..., ge=0, le=100)
    priority_severity_penalty: float = Field(..., ge=0, le=100)
    streak_penalty: float = Field(..., ge=0, le=100)
    context_switch_penalty: float = Field(..., ge=0, le=100)


class ScoreSnapshot(BaseModel):
    """The procrastination score with all contributing factors."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    shame_level: ShameLevel
    breakdown: ScoreBreakdown
    trend: Trend
    calculated_at: datetime
    summary: str


class ScoreHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    timestamp: datetime


class ShameMessage(BaseModel):
    level: ShameLevel
    message: str
    emoji: str
    action: SuggestedAction
    urgency: Urgency
    generated_at: datetime


class TriggerCheck(BaseModel):
    """Outcome of one countdown evaluation tick."""

    should_warn: bool = False
    should_send: bool = False
    minutes_remaining: int = 0
    cancelled: bool = False
    warning: Optional[str] = None
    configured: bool = True


class CountdownStatus(BaseModel):
    is_active: bool
    minutes_remaining: int
    warnings_sent: int
    will_send_at: Optional[datetime] = None
    configured: bool = True


class DisableAttempt(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    reason: Optional[str] = None


class GuardState(BaseModel):
    """Whether the engine may be paused right now, and why not."""

    can_disable: bool
    is_work_hours: bool
    disable_attempts: int
    last_disable_attempt: Optional[datetime] = None
    required_tasks: List[str] = Field(default_factory=list)
    manager_approval_required: bool
    suspicious_activity: bool


class DisableVerdict(BaseModel):
    allowed: bool
    message: str


class ReEnableAdvice(BaseModel):
    should_re_enable: bool
    reason: str


class ActivityTotal(BaseModel):
    activity: str
    total_minutes: float
    occurrences: int


class ProductivityReport(BaseModel):
    period: ReportPeriod
    start: datetime
    end: datetime
    average_score: float
    worst_score: int
    best_score: int
    total_tasks_completed: int
    total_tasks_overdue: int
    total_minutes_productive: float
    total_minutes_wasted: float
    top_procrastination_activities: List[ActivityTotal] = Field(default_factory=list)
    shame_level_distribution: Dict[int, int] = Field(default_factory=dict)


__all__ = [
    "ActivityCategory",
    "ActivitySource",
    "TaskStatus",
    "TaskSource",
    "Trend",
    "SuggestedAction",
    "Urgency",
    "ReportPeriod",
    "TaskPriority",
    "ShameLevel",
    "Activity",
    "Task",
    "ScoreBreakdown",
    "ScoreSnapshot",
    "ScoreHistoryEntry",
    "ShameMessage",
    "TriggerCheck",
    "CountdownStatus",
    "DisableAttempt",
    "GuardState",
    "DisableVerdict",
    "ReEnableAdvice",
    "ActivityTotal",
    "ProductivityReport",
]
