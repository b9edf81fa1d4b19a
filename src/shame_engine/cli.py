"""Simple CLI for manual evaluation of the engine."""
from __future__ import annotations

import argparse
import asyncio
import random
from typing import List, Optional, Sequence, Tuple

from shame_engine.bot.utils import CommandArgsError, build_score_message, parse_task_args
from shame_engine.config import get_settings
from shame_engine.session import EngineSession, Notifiers


def parse_activity(value: str) -> Tuple[str, float]:
    """``"youtube.com:45"`` -> ("youtube.com", 45.0); the last colon separates minutes."""

    title, sep, raw_minutes = value.rpartition(":")
    if not sep or not title:
        raise argparse.ArgumentTypeError(f"expected 'title:minutes', got '{value}'")
    try:
        minutes = float(raw_minutes)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{raw_minutes}' is not a number of minutes") from exc
    if minutes < 0:
        raise argparse.ArgumentTypeError("minutes cannot be negative")
    return title, minutes


def build_session(
    activities: Sequence[Tuple[str, float]],
    tasks: Sequence[str],
    *,
    seed: Optional[int] = None,
) -> EngineSession:
    settings = get_settings()
    session = EngineSession(settings, rng=random.Random(seed))
    for title, minutes in activities:
        session.activities.log(title, minutes)
    for raw in tasks:
        try:
            title, priority, due = parse_task_args(raw, settings.timezone)
        except CommandArgsError as exc:
            raise SystemExit(f"--task: {exc}") from exc
        session.tasks.add(title, priority=priority, due=due)
    return session


async def run_cli(session: EngineSession, *, send: bool = False) -> List[str]:
    evaluation = session.evaluate()
    lines = [
        build_score_message(evaluation.snapshot, session.calculator.streak_days),
        "",
        f"{evaluation.message.emoji} {evaluation.message.message}",
        f"Action: {evaluation.message.action} (urgency: {evaluation.message.urgency})",
    ]
    if evaluation.trigger.warning:
        lines.append(evaluation.trigger.warning)
    if send:
        outcome = await session.dispatch(evaluation, Notifiers.from_settings(session.settings))
        lines.extend(outcome.user_alerts)
    for line in lines:
        print(line)
    return lines


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Manual CLI entry point for shame_engine")
    parser.add_argument(
        "--activity",
        action="append",
        default=[],
        type=parse_activity,
        help="Activity as 'title:minutes', repeatable",
    )
    parser.add_argument(
        "--task",
        action="append",
        default=[],
        help="Task as 'title | p0-p3 | YYYY-MM-DD [HH:MM]', repeatable",
    )
    parser.add_argument("--seed", type=int, help="Seed for message selection")
    parser.add_argument("--send", action="store_true", help="Dispatch to configured channels")
    args = parser.parse_args(argv)

    session = build_session(args.activity, args.task, seed=args.seed)
    asyncio.run(run_cli(session, send=args.send))


if __name__ == "__main__":
    main()
