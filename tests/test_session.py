import random
from datetime import timedelta

import pytest

from conftest import FrozenClock
from shame_engine.config import Settings
from shame_engine.models import TaskPriority
from shame_engine.session import EngineSession, Notifiers, build_mom_email_config, build_work_calendar


class FakeDiscord:
    def __init__(self, ok: bool = True):
        self.ok = ok
        self.posts = []

    async def post_shame(self, message, snapshot):
        self.posts.append((message, snapshot))
        return self.ok


class FakeMomEmail:
    def __init__(self, results=(True,)):
        self.results = list(results)
        self.warnings = []
        self.nuclear = []

    async def send_warning(self, snapshot):
        self.warnings.append(snapshot)
        return True

    async def send_nuclear(self, snapshot, report):
        self.nuclear.append((snapshot, report))
        return self.results.pop(0)


def _settings(tmp_path, **overrides):
    values = {
        "LOG_DIR": tmp_path / "logs",
        "MOM_EMAIL": "mom@example.com",
        "MOM_WARNING_THRESHOLD": 70,
        "MOM_SEND_THRESHOLD": 80,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _procrastinating_session(tmp_path, clock):
    session = EngineSession(_settings(tmp_path), clock=clock, rng=random.Random(1))
    session.tasks.add("fix prod", priority=TaskPriority.P0_CRITICAL, due=clock.now() - timedelta(hours=1))
    session.activities.log("youtube.com", 120)
    return session


def test_builders_follow_settings(tmp_path):
    settings = _settings(tmp_path, SHAME_WORK_DAYS="1,2", SHAME_FOCUS_MODE=True)
    calendar = build_work_calendar(settings)
    assert calendar.work_days == (1, 2)
    assert calendar.focus_mode is True

    config = build_mom_email_config(settings)
    assert config.mom_email == "mom@example.com"
    assert config.send_threshold == 80
    assert build_mom_email_config(Settings(_env_file=None)) is None


def test_evaluate_scores_today_and_flips_overdue(tmp_path, clock):
    session = _procrastinating_session(tmp_path, clock)
    evaluation = session.evaluate()

    assert evaluation.snapshot.score == 85
    assert evaluation.message.action == "mom_email"
    assert evaluation.trigger.should_warn and evaluation.trigger.minutes_remaining == 5
    assert evaluation.countdown.is_active
    assert session.tasks.all()[0].status == "overdue"
    assert session.last_snapshot is evaluation.snapshot


@pytest.mark.anyio
async def test_dispatch_retries_failed_nuclear_email(tmp_path, clock):
    session = _procrastinating_session(tmp_path, clock)
    discord = FakeDiscord()
    mom = FakeMomEmail(results=[False, True])
    notifiers = Notifiers(discord=discord, mom_email=mom)

    outcome = await session.dispatch(session.evaluate(), notifiers)
    assert outcome.discord_posted is True
    assert outcome.mom_warning_sent is True
    assert outcome.mom_email_sent is None
    assert any("WARNING 1" in alert for alert in outcome.user_alerts)

    clock.advance(minutes=5)
    failed = await session.dispatch(session.evaluate(), notifiers)
    assert failed.mom_email_sent is False
    assert session.countdown.status().is_active

    clock.advance(minutes=1)
    sent = await session.dispatch(session.evaluate(), notifiers)
    assert sent.mom_email_sent is True
    assert len(mom.nuclear) == 2
    assert session.countdown.status().is_active is False
    assert session.countdown.state.last_sent_at == clock.now()


@pytest.mark.anyio
async def test_dispatch_skips_discord_for_low_levels(tmp_path, clock):
    session = EngineSession(_settings(tmp_path), clock=clock, rng=random.Random(0))
    session.activities.log("github.com", 60)
    discord = FakeDiscord()

    outcome = await session.dispatch(session.evaluate(), Notifiers(discord=discord))
    assert outcome.discord_posted is None
    assert discord.posts == []


def test_admit_defeat_cancels_and_resets(tmp_path, clock):
    session = _procrastinating_session(tmp_path, clock)
    session.evaluate()
    message = session.admit_defeat()

    assert "CANCELLED" in message
    assert session.countdown.status().is_active is False
    assert session.calculator.history()[-1].score == 0
    assert session.calculator.streak_days == 0


def test_pause_blocked_with_critical_task(tmp_path, clock):
    session = _procrastinating_session(tmp_path, clock)
    verdict = session.pause("need a nap")
    assert not verdict.allowed
    assert session.paused is False
    assert "1 time" in verdict.message


def test_pause_and_auto_re_enable(tmp_path):
    clock = FrozenClock()
    session = EngineSession(_settings(tmp_path), clock=clock)
    assert session.pause().allowed
    assert session.paused

    assert not session.check_re_enable().should_re_enable
    assert session.paused

    clock.advance(minutes=5)
    session.pause()
    advice = session.check_re_enable()
    assert advice.should_re_enable
    assert session.paused is False


def test_notifiers_from_settings(tmp_path):
    assert Notifiers.from_settings(Settings(_env_file=None)) == Notifiers()

    notifiers = Notifiers.from_settings(
        _settings(tmp_path, DISCORD_WEBHOOK_URL="https://discord.example/webhook")
    )
    assert notifiers.discord is not None
    assert notifiers.mom_email is not None

    disabled = Notifiers.from_settings(_settings(tmp_path, MOM_EMAIL_ENABLED=False))
    assert disabled.mom_email is None
