"""Mom email countdown: arming, wall-clock countdown, cancellation and cooldown.

States: idle, warned, countdown active, cooled down. The countdown never relies
on a scheduled callback; every call recomputes the remaining time from the
recorded start, so delayed or skipped ticks only delay detection of expiry.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from shame_engine.logging_utils import LOGGER, log_event
from shame_engine.models import CountdownStatus, TriggerCheck
from shame_engine.time_utils import Clock, SystemClock

NOT_CONFIGURED_MESSAGE = "Mom email is not configured. The nuclear option is unavailable (for now)."

WARNING_MESSAGES = [
    "⚠️ WARNING {count}: Your procrastination score is approaching Mom Email territory...",
    "⚠️ WARNING {count}: I have your mom's email loaded. Don't test me.",
    "⚠️ WARNING {count}: The Mom Email is being drafted. You still have time.",
    "⚠️ FINAL WARNING: Mom email is ARMED. Get to work or she'll know EVERYTHING.",
]


class MomEmailConfig(BaseModel):
    mom_email: str
    user_name: str = "Your Child"
    warning_threshold: int = Field(85, ge=0, le=100)
    send_threshold: int = Field(95, ge=0, le=100)
    cooldown_minutes: int = Field(60, ge=0)
    countdown_minutes: int = Field(5, ge=1)
    enabled: bool = True

    @model_validator(mode="after")
    def _check_threshold_order(self) -> "MomEmailConfig":
        if self.warning_threshold > self.send_threshold:
            raise ValueError(
                f"warning_threshold ({self.warning_threshold}) must not exceed "
                f"send_threshold ({self.send_threshold})"
            )
        return self


@dataclass
class CountdownState:
    countdown_minutes: int = 5
    warnings_sent: int = 0
    last_warning_at: Optional[datetime] = None
    last_sent_at: Optional[datetime] = None
    countdown_active: bool = False
    countdown_started_at: Optional[datetime] = None


class MomCountdown:
    def __init__(self, config: Optional[MomEmailConfig], clock: Optional[Clock] = None):
        self.config = config
        self.clock = clock or SystemClock()
        self.state = CountdownState(
            countdown_minutes=config.countdown_minutes if config else CountdownState.countdown_minutes
        )

    @property
    def is_configured(self) -> bool:
        return self.config is not None and self.config.enabled

    def check_trigger(self, score: int) -> TriggerCheck:
        """Evaluate one tick. The caller performs any send and acknowledges it."""

        if not self.is_configured:
            return TriggerCheck(configured=False)
        config = self.config
        now = self.clock.now()

        if self._in_cooldown(now):
            return TriggerCheck()

        if self.state.countdown_active and self.state.countdown_started_at is not None:
            remaining = self._remaining_minutes(now)
            if remaining <= 0:
                return TriggerCheck(should_send=True)
            if score < config.warning_threshold:
                self._clear_countdown()
                log_event({"status": "info", "kind": "countdown_cancelled", "score": score, "by": "score"})
                return TriggerCheck(cancelled=True)
            return TriggerCheck(minutes_remaining=math.ceil(remaining))

        if score >= config.send_threshold:
            self.state.countdown_active = True
            self.state.countdown_started_at = now
            warning = self._record_warning(now)
            log_event({"status": "info", "kind": "countdown_started", "score": score})
            return TriggerCheck(
                should_warn=True,
                minutes_remaining=self.state.countdown_minutes,
                warning=warning,
            )

        if score >= config.warning_threshold:
            return TriggerCheck(should_warn=True, warning=self._record_warning(now))

        return TriggerCheck()

    def record_send_success(self) -> None:
        """Acknowledge a delivered email: start the cooldown and clear the countdown."""

        if not self.is_configured:
            return
        self.state.last_sent_at = self.clock.now()
        self._clear_countdown()
        log_event({"status": "success", "kind": "mom_email_sent"})

    def cancel(self) -> str:
        if not self.is_configured:
            return NOT_CONFIGURED_MESSAGE
        was_active = self.state.countdown_active
        self._clear_countdown()
        if was_active:
            log_event({"status": "info", "kind": "countdown_cancelled", "by": "user"})
        return "🎉 Mom email countdown CANCELLED! Good choice. Now keep working."

    def status(self) -> CountdownStatus:
        if not self.is_configured:
            return CountdownStatus(
                is_active=False,
                minutes_remaining=0,
                warnings_sent=self.state.warnings_sent,
                configured=False,
            )
        started = self.state.countdown_started_at
        if not self.state.countdown_active or started is None:
            return CountdownStatus(is_active=False, minutes_remaining=0, warnings_sent=self.state.warnings_sent)
        remaining = max(0.0, self._remaining_minutes(self.clock.now()))
        return CountdownStatus(
            is_active=True,
            minutes_remaining=math.ceil(remaining),
            warnings_sent=self.state.warnings_sent,
            will_send_at=started + timedelta(minutes=self.state.countdown_minutes),
        )

    def _in_cooldown(self, now: datetime) -> bool:
        last_sent = self.state.last_sent_at
        if last_sent is None:
            return False
        return now - last_sent < timedelta(minutes=self.config.cooldown_minutes)

    def _remaining_minutes(self, now: datetime) -> float:
        elapsed = (now - self.state.countdown_started_at).total_seconds() / 60
        return self.state.countdown_minutes - elapsed

    def _record_warning(self, now: datetime) -> str:
        self.state.warnings_sent += 1
        self.state.last_warning_at = now
        count = self.state.warnings_sent
        LOGGER.warning("Mom email warning #%s issued", count)
        template = WARNING_MESSAGES[min(count, len(WARNING_MESSAGES)) - 1]
        return template.format(count=count)

    def _clear_countdown(self) -> None:
        self.state.countdown_active = False
        self.state.countdown_started_at = None


__all__ = ["MomEmailConfig", "CountdownState", "MomCountdown", "NOT_CONFIGURED_MESSAGE"]
