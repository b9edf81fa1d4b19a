from __future__ import annotations

import asyncio
from datetime import date

from aiogram import Bot

from shame_engine.bot.utils import build_evaluation_message
from shame_engine.logging_utils import LOGGER
from shame_engine.session import DispatchOutcome, EngineSession, Notifiers
from shame_engine.time_utils import get_timezone


class ShameScheduler:
    """Periodic evaluation loop. Each tick scores, dispatches and reports to the chat."""

    def __init__(
        self,
        session: EngineSession,
        notifiers: Notifiers,
        chat_id: int | None,
        interval_minutes: int = 5,
    ):
        self.session = session
        self.notifiers = notifiers
        self.chat_id = chat_id
        self.interval_seconds = interval_minutes * 60
        self._task: asyncio.Task | None = None
        self._running = False
        self._last_report_day: date | None = None

    async def start(self, bot: Bot) -> None:
        if self._task:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(bot))

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:  # pragma: no cover - shutdown path
                pass
            self._task = None

    async def tick(self, bot: Bot) -> DispatchOutcome | None:
        self.session.check_re_enable()
        if self.session.paused:
            return None
        await self.post_daily_report()
        evaluation = self.session.evaluate()
        outcome = await self.session.dispatch(evaluation, self.notifiers)
        if self.chat_id is not None and (evaluation.message.level > 1 or outcome.user_alerts):
            text = build_evaluation_message(evaluation)
            if outcome.user_alerts:
                text = "\n\n".join([text, *outcome.user_alerts])
            await bot.send_message(self.chat_id, text)
        return outcome

    async def post_daily_report(self) -> bool | None:
        """Post the day's report to Discord once, after work hours end."""

        if self.notifiers.discord is None:
            return None
        calendar = self.session.calendar
        local = self.session.clock.now().astimezone(get_timezone(calendar.timezone))
        if local.hour < calendar.end_hour or self._last_report_day == local.date():
            return None
        self._last_report_day = local.date()
        return await self.notifiers.discord.post_report(self.session.report())

    async def _loop(self, bot: Bot) -> None:
        while self._running:
            try:
                await self.tick(bot)
            except Exception:
                LOGGER.exception("Scheduled evaluation failed")
            await asyncio.sleep(self.interval_seconds)
