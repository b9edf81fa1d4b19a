import random
from datetime import timedelta

import pytest

from shame_engine.bot.scheduler import ShameScheduler
from shame_engine.config import Settings
from shame_engine.models import TaskPriority
from shame_engine.session import EngineSession, Notifiers


class FakeBot:
    def __init__(self):
        self.sent = []

    async def send_message(self, chat_id, text):
        self.sent.append((chat_id, text))


def _session(tmp_path, clock):
    settings = Settings(_env_file=None, LOG_DIR=tmp_path, MOM_EMAIL="mom@example.com")
    return EngineSession(settings, clock=clock, rng=random.Random(5))


@pytest.mark.anyio
async def test_tick_messages_chat_for_shameful_scores(tmp_path, clock):
    session = _session(tmp_path, clock)
    session.tasks.add("fix prod", priority=TaskPriority.P0_CRITICAL, due=clock.now() - timedelta(hours=1))
    session.activities.log("youtube.com", 120)
    bot = FakeBot()

    outcome = await ShameScheduler(session, Notifiers(), chat_id=42).tick(bot)

    assert outcome is not None
    chat_id, text = bot.sent[0]
    assert chat_id == 42
    assert "Score: 85/100" in text
    # 85 sits in the warning band of the default thresholds.
    assert "WARNING 1" in text


@pytest.mark.anyio
async def test_tick_is_quiet_for_gentle_scores(tmp_path, clock):
    session = _session(tmp_path, clock)
    session.activities.log("github.com", 60)
    bot = FakeBot()
    await ShameScheduler(session, Notifiers(), chat_id=42).tick(bot)
    assert bot.sent == []


@pytest.mark.anyio
async def test_paused_session_skips_evaluation(tmp_path, clock):
    session = _session(tmp_path, clock)
    assert session.pause().allowed
    bot = FakeBot()

    assert await ShameScheduler(session, Notifiers(), chat_id=42).tick(bot) is None
    assert session.calculator.history() == []


class FakeDiscord:
    def __init__(self):
        self.reports = []

    async def post_report(self, report):
        self.reports.append(report)
        return True


@pytest.mark.anyio
async def test_daily_report_posts_once_after_work_hours(tmp_path, clock):
    session = _session(tmp_path, clock)
    discord = FakeDiscord()
    scheduler = ShameScheduler(session, Notifiers(discord=discord), chat_id=None)

    assert await scheduler.post_daily_report() is None
    clock.current = clock.now().replace(hour=17, minute=5)
    assert await scheduler.post_daily_report() is True
    assert await scheduler.post_daily_report() is None
    assert len(discord.reports) == 1

    clock.advance(days=1)
    assert await scheduler.post_daily_report() is True
