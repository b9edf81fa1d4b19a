"""Telegram command handlers."""
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import Message

from shame_engine.bot.utils import (
    ADMIT_BUTTON_TEXT,
    SCORE_BUTTON_TEXT,
    TASKS_BUTTON_TEXT,
    CommandArgsError,
    build_activity_logged_message,
    build_report_message,
    build_score_message,
    build_status_message,
    build_tasks_overview_message,
    get_main_keyboard,
    parse_log_args,
    parse_task_args,
)
from shame_engine.logging_utils import log_event
from shame_engine.messages import redemption_arc
from shame_engine.session import EngineSession

router = Router()

FOCUS_STREAK_MINUTES = 25

_session: EngineSession | None = None


def setup_dependencies(session: EngineSession) -> None:
    global _session
    _session = session


def _get_session() -> EngineSession:
    if _session is None:  # pragma: no cover
        raise RuntimeError("Shame handler dependencies are not configured")
    return _session


@router.message(CommandStart())
async def handle_start(message: Message) -> None:
    await message.answer(
        "👁️ The Shame Engine is watching.\n"
        "Log what you do with /log <activity> <minutes>, add tasks with /addtask.",
        reply_markup=get_main_keyboard(),
    )


@router.message(Command("help"))
async def handle_help(message: Message) -> None:
    await message.answer(
        "/score - current procrastination score\n"
        "/tasks - open tasks\n"
        "/addtask <title> | <p0-p3> | <YYYY-MM-DD [HH:MM]>\n"
        "/done <task id>\n"
        "/log <activity> <minutes>\n"
        "/pause [reason] - try to pause the engine (good luck)\n"
        "/admit - admit defeat, reset the score\n"
        "/cancel - cancel the mom email countdown\n"
        "/status - countdown and pause guard\n"
        "/report - today's procrastination report",
        reply_markup=get_main_keyboard(),
    )


@router.message(Command("score"))
@router.message(lambda message: (message.text or "") == SCORE_BUTTON_TEXT)
async def handle_score(message: Message) -> None:
    session = _get_session()
    snapshot = session.score()
    await message.answer(
        build_score_message(snapshot, session.calculator.streak_days),
        reply_markup=get_main_keyboard(),
    )


@router.message(Command("tasks"))
@router.message(lambda message: (message.text or "") == TASKS_BUTTON_TEXT)
async def handle_tasks(message: Message) -> None:
    await message.answer(build_tasks_overview_message(_get_session()), reply_markup=get_main_keyboard())


@router.message(Command("addtask"))
async def handle_add_task(message: Message, command: CommandObject) -> None:
    session = _get_session()
    try:
        title, priority, due = parse_task_args(command.args, session.settings.timezone)
    except CommandArgsError as exc:
        await message.answer(str(exc), reply_markup=get_main_keyboard())
        return
    task = session.tasks.add(title, priority=priority, due=due)
    log_event({"status": "info", "kind": "task_added", "task_id": task.id, "priority": int(priority)})
    await message.answer(f"Task added: {task.title} (id={task.id})", reply_markup=get_main_keyboard())


@router.message(Command("done"))
async def handle_done(message: Message, command: CommandObject) -> None:
    session = _get_session()
    task_id = (command.args or "").strip()
    if not task_id:
        await message.answer("Usage: /done <task id>", reply_markup=get_main_keyboard())
        return
    previous = session.last_snapshot.score if session.last_snapshot else None
    task = session.tasks.complete(task_id)
    if task is None:
        await message.answer(f"No task with id {task_id}.", reply_markup=get_main_keyboard())
        return
    log_event({"status": "info", "kind": "task_done", "task_id": task.id})
    lines = [session.selector.positive(task.title).message]
    if previous is not None:
        current = session.score().score
        if current < previous:
            completed = sum(1 for item in session.tasks.all() if item.is_done)
            lines.append(redemption_arc(previous, current, completed))
    await message.answer("\n".join(lines), reply_markup=get_main_keyboard())


@router.message(Command("log"))
async def handle_log(message: Message, command: CommandObject) -> None:
    session = _get_session()
    try:
        title, minutes = parse_log_args(command.args)
    except CommandArgsError as exc:
        await message.answer(str(exc), reply_markup=get_main_keyboard())
        return
    activity = session.activities.log(title, minutes)
    text = build_activity_logged_message(activity)
    if activity.category == "productive" and minutes >= FOCUS_STREAK_MINUTES:
        text = f"{text}\n{session.selector.focus_streak(minutes).message}"
    await message.answer(text, reply_markup=get_main_keyboard())


@router.message(Command("pause"))
async def handle_pause(message: Message, command: CommandObject) -> None:
    verdict = _get_session().pause(command.args)
    await message.answer(verdict.message, reply_markup=get_main_keyboard())


@router.message(Command("resume"))
async def handle_resume(message: Message) -> None:
    _get_session().resume()
    await message.answer("😈 Welcome back. The Shame Engine missed you.", reply_markup=get_main_keyboard())


@router.message(Command("admit"))
@router.message(lambda message: (message.text or "") == ADMIT_BUTTON_TEXT)
async def handle_admit(message: Message) -> None:
    await message.answer(_get_session().admit_defeat(), reply_markup=get_main_keyboard())


@router.message(Command("cancel"))
async def handle_cancel(message: Message) -> None:
    await message.answer(_get_session().cancel_countdown(), reply_markup=get_main_keyboard())


@router.message(Command("excuse"))
async def handle_excuse(message: Message) -> None:
    await message.answer(_get_session().selector.creative_excuse(), reply_markup=get_main_keyboard())


@router.message(Command("status"))
async def handle_status(message: Message) -> None:
    session = _get_session()
    await message.answer(
        build_status_message(session.countdown.status(), session.guard_state(), session.paused),
        reply_markup=get_main_keyboard(),
    )


@router.message(Command("report"))
async def handle_report(message: Message) -> None:
    await message.answer(build_report_message(_get_session().report()), reply_markup=get_main_keyboard())
