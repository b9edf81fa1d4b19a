"""Bot bootstrap module."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage

from shame_engine.bot import handlers
from shame_engine.bot.scheduler import ShameScheduler
from shame_engine.config import Settings, get_settings
from shame_engine.session import EngineSession, Notifiers


@dataclass(slots=True)
class ShameRuntime:
    session: EngineSession
    scheduler: ShameScheduler


def build_dispatcher(settings: Settings) -> tuple[Dispatcher, ShameRuntime]:
    storage = MemoryStorage()
    dp = Dispatcher(storage=storage)
    session = EngineSession(settings)
    handlers.setup_dependencies(session)
    dp.include_router(handlers.router)
    scheduler = ShameScheduler(
        session,
        Notifiers.from_settings(settings),
        settings.telegram_chat_id,
        settings.polling_interval_minutes,
    )
    return dp, ShameRuntime(session=session, scheduler=scheduler)


async def run_bot() -> None:
    settings = get_settings()
    if settings.telegram_bot_token is None:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured")
    bot = Bot(settings.telegram_bot_token.get_secret_value())
    dp, runtime = build_dispatcher(settings)

    @dp.startup.register
    async def _on_startup() -> None:
        await runtime.scheduler.start(bot)

    @dp.shutdown.register
    async def _on_shutdown() -> None:
        await runtime.scheduler.stop()

    await dp.start_polling(bot)


def main() -> None:
    asyncio.run(run_bot())


if __name__ == "__main__":
    main()
