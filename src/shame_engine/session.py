"""Engine session: the single owner of all mutable engine state.

All mutable engine state (activity log, tasks, score history, streak,
countdown, disable attempts) hangs off one ``EngineSession``.
Time and randomness are injected so a tick can be replayed deterministically.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional

from shame_engine.config import Settings
from shame_engine.countdown import MomCountdown, MomEmailConfig
from shame_engine.guard import DisableGuard, WorkCalendar
from shame_engine.logging_utils import log_event
from shame_engine.messages import MessageSelector, disable_attempt_shame
from shame_engine.models import (
    Activity,
    CountdownStatus,
    DisableVerdict,
    GuardState,
    ProductivityReport,
    ReEnableAdvice,
    ReportPeriod,
    ScoreSnapshot,
    ShameMessage,
    Task,
    TriggerCheck,
)
from shame_engine.notifiers.discord import DiscordNotifier
from shame_engine.notifiers.email import MomEmailNotifier, SmtpConfig
from shame_engine.reports import generate_report
from shame_engine.scoring import ScoreCalculator
from shame_engine.stores import ActivityLog, TaskStore
from shame_engine.time_utils import Clock, SystemClock, get_timezone

DISCORD_ACTIONS = ("discord_post", "mom_email")


def build_mom_email_config(settings: Settings) -> Optional[MomEmailConfig]:
    if not settings.mom_email:
        return None
    return MomEmailConfig(
        mom_email=settings.mom_email,
        user_name=settings.user_name,
        warning_threshold=settings.mom_warning_threshold,
        send_threshold=settings.mom_send_threshold,
        cooldown_minutes=settings.mom_cooldown_minutes,
        countdown_minutes=settings.mom_countdown_minutes,
        enabled=settings.mom_email_enabled,
    )


def build_work_calendar(settings: Settings) -> WorkCalendar:
    return WorkCalendar(
        start_hour=settings.work_hours_start,
        end_hour=settings.work_hours_end,
        work_days=tuple(settings.work_days),
        timezone=settings.timezone,
        focus_mode=settings.focus_mode_enabled,
    )


@dataclass(slots=True)
class Evaluation:
    snapshot: ScoreSnapshot
    message: ShameMessage
    trigger: TriggerCheck
    countdown: CountdownStatus
    activities: List[Activity]
    tasks: List[Task]
    context_switches: int


@dataclass(slots=True)
class Notifiers:
    discord: Optional[DiscordNotifier] = None
    mom_email: Optional[MomEmailNotifier] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Notifiers":
        discord = None
        if settings.discord_webhook_url:
            discord = DiscordNotifier(settings.discord_webhook_url, settings.user_name)
        mom_email = None
        mom_config = build_mom_email_config(settings)
        if mom_config is not None and mom_config.enabled:
            mom_email = MomEmailNotifier(mom_config, SmtpConfig.from_settings(settings))
        return cls(discord=discord, mom_email=mom_email)


@dataclass(slots=True)
class DispatchOutcome:
    """What one dispatch actually delivered; ``None`` means the channel was not used."""

    discord_posted: Optional[bool] = None
    mom_warning_sent: Optional[bool] = None
    mom_email_sent: Optional[bool] = None
    user_alerts: List[str] = field(default_factory=list)


class EngineSession:
    def __init__(
        self,
        settings: Settings,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        self.clock = clock or SystemClock(get_timezone(settings.timezone))
        self.calendar = build_work_calendar(settings)
        self.activities = ActivityLog(self.clock)
        self.tasks = TaskStore(self.clock)
        self.calculator = ScoreCalculator(self.clock)
        self.selector = MessageSelector(rng or random.Random(), self.clock)
        self.countdown = MomCountdown(build_mom_email_config(settings), self.clock)
        self.guard = DisableGuard(self.clock)
        self.paused = False
        self.last_snapshot: Optional[ScoreSnapshot] = None

    def score(self) -> ScoreSnapshot:
        """Recalculate the score without touching the countdown."""

        self.tasks.refresh_overdue()
        snapshot = self.calculator.calculate(
            self.activities.today(),
            self.tasks.all(),
            self.activities.switches.count,
        )
        self.last_snapshot = snapshot
        return snapshot

    def evaluate(self) -> Evaluation:
        """Run one tick: score, pick the message, advance the countdown."""

        snapshot = self.score()
        activities = self.activities.today()
        tasks = self.tasks.all()
        switches = self.activities.switches.count
        message = self.selector.select(snapshot, tasks, activities, switches)
        trigger = self.countdown.check_trigger(snapshot.score)
        log_event(
            {
                "status": "info",
                "kind": "evaluation",
                "score": snapshot.score,
                "level": int(snapshot.shame_level),
                "action": message.action,
                "should_warn": trigger.should_warn,
                "should_send": trigger.should_send,
            }
        )
        return Evaluation(
            snapshot=snapshot,
            message=message,
            trigger=trigger,
            countdown=self.countdown.status(),
            activities=activities,
            tasks=tasks,
            context_switches=switches,
        )

    def report(self, period: ReportPeriod = "daily") -> ProductivityReport:
        return generate_report(
            self.activities.today(),
            self.tasks.all(),
            self.calculator.history(),
            self.clock.now(),
            period,
        )

    async def dispatch(self, evaluation: Evaluation, notifiers: Notifiers) -> DispatchOutcome:
        """Route an evaluation to its channels.

        The countdown is acknowledged only after the nuclear email is actually
        delivered; a failed send leaves it armed so the next tick retries.
        """

        outcome = DispatchOutcome()
        trigger = evaluation.trigger
        if trigger.warning:
            outcome.user_alerts.append(trigger.warning)
        if trigger.cancelled:
            outcome.user_alerts.append("🎉 Score dropped below the warning line. Mom email countdown cancelled.")

        if evaluation.message.action in DISCORD_ACTIONS and notifiers.discord is not None:
            outcome.discord_posted = await notifiers.discord.post_shame(
                evaluation.message, evaluation.snapshot
            )

        if notifiers.mom_email is None:
            return outcome

        if trigger.should_send:
            sent = await notifiers.mom_email.send_nuclear(evaluation.snapshot, self.report())
            outcome.mom_email_sent = sent
            if sent:
                self.countdown.record_send_success()
                outcome.user_alerts.append(
                    f"☢️ MOM EMAIL SENT. Score was {evaluation.snapshot.score}/100. "
                    "Your mother has been informed. Good luck."
                )
            else:
                outcome.user_alerts.append("Failed to send mom email. You got lucky THIS time.")
        elif trigger.should_warn and trigger.minutes_remaining > 0:
            # Countdown just armed: mom gets the preliminary heads-up.
            outcome.mom_warning_sent = await notifiers.mom_email.send_warning(evaluation.snapshot)
        return outcome

    def admit_defeat(self) -> str:
        cancel_message = self.countdown.cancel()
        self.calculator.reset_score()
        log_event({"status": "info", "kind": "admit_defeat"})
        return (
            "🏳️ Defeat admitted. Score reset, streak cleared.\n"
            f"{cancel_message}\n"
            "Now close the distractions and do ONE task."
        )

    def cancel_countdown(self) -> str:
        return self.countdown.cancel()

    def guard_state(self) -> GuardState:
        return self.guard.can_disable(self.calendar, self.tasks.all())

    def pause(self, reason: Optional[str] = None) -> DisableVerdict:
        verdict = self.guard.attempt_disable(self.calendar, self.tasks.all(), reason)
        if verdict.allowed:
            self.paused = True
            return verdict
        taunt = disable_attempt_shame(len(self.guard.attempts()))
        if taunt:
            return DisableVerdict(allowed=False, message=f"{verdict.message}\n\n{taunt}")
        return verdict

    def resume(self) -> None:
        self.paused = False

    def check_re_enable(self) -> ReEnableAdvice:
        """Re-arm a paused engine when the guard flags the pause as suspicious."""

        advice = self.guard.check_auto_re_enable(self.calendar)
        if advice.should_re_enable and self.paused:
            self.paused = False
            log_event({"status": "info", "kind": "auto_re_enable", "reason": advice.reason})
        return advice


__all__ = [
    "build_mom_email_config",
    "build_work_calendar",
    "Evaluation",
    "Notifiers",
    "DispatchOutcome",
    "EngineSession",
]
