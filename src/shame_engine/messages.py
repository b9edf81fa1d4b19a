"""Escalating shame copy: template pools per level plus placeholder filling."""
from __future__ import annotations

import random
from datetime import datetime
from string import Formatter
from typing import Dict, List, Optional, Sequence

from shame_engine.categories import is_wasted
from shame_engine.escalation import determine_action, determine_urgency, shame_level_emoji
from shame_engine.formatting import format_duration, format_wasted_time, round_half_up
from shame_engine.models import Activity, ScoreSnapshot, ShameLevel, ShameMessage, Task
from shame_engine.time_utils import Clock, SystemClock

PLACEHOLDERS = frozenset({"activity", "time", "task", "due", "tasks", "score", "switches", "duration"})

FALLBACK_ACTIVITY = "the internet"
FALLBACK_TASK = "your work"
FALLBACK_DUE = "soon"
FALLBACK_WASTED_MINUTES = 30

MESSAGE_TEMPLATES: Dict[ShameLevel, List[str]] = {
    ShameLevel.GENTLE_NUDGE: [
        "Hey, just a friendly reminder about that deadline... 😊",
        "You've got this! Maybe time to focus?",
        "Psst... your task list is feeling a little lonely.",
        "Just a gentle tap on the shoulder - how's that task going?",
        "Remember that thing you said you'd do? Still waiting... no pressure though!",
        "Your future self would really appreciate some productivity right about now.",
        "Not to interrupt, but... you DID have plans to be productive, right?",
        "Quick check-in! How's the work going? (Please say it's going well.)",
    ],
    ShameLevel.PASSIVE_AGGRESSIVE: [
        "Interesting choice spending {time} on {activity} instead of {task}...",
        "I'm sure that {activity} session was very educational. 🙄",
        "Oh, you're still on {activity}? I thought that was just a 'quick break.'",
        "No judgement, but {activity} doesn't seem to be on your task list. Just saying.",
        "Your task is due {due}. But sure, {activity} looks important too.",
        "I notice you've been 'researching' on {activity} for {time}. Must be a deep topic.",
        "Cool, cool, cool. Just casually watching your deadline approach while you're on {activity}.",
        "That's a bold strategy. Let's see if {activity} instead of working pays off.",
    ],
    ShameLevel.DIRECT_CALLOUT: [
        "You're literally scrolling {activity} while your deadline is {due}.",
        "At this rate, you'll finish that task sometime next quarter.",
        "Let me get this straight: {task} is due {due}, and you're on {activity}? Really?",
        "I've been watching you procrastinate for {time}. It's... impressive, actually.",
        "Your task list is crying. I can hear it from here.",
        "BREAKING NEWS: Local developer discovers {activity} while deadline burns.",
        "Plot twist: the work isn't going to do itself. I checked.",
        "You've context-switched {switches} times in the last hour. That's not multitasking, that's panic.",
    ],
    ShameLevel.AGGRESSIVE_SHAME: [
        "STOP. Just stop. Close {activity}. Do the thing. NOW.",
        "Your future self is screaming. LISTEN TO THEM.",
        "You have {tasks} overdue tasks and you're on {activity}. What is wrong with you?!",
        "I'm not angry, I'm disappointed. Actually no, I'm angry too. GET TO WORK.",
        "The deadline is {due}. THE DEADLINE. IS. {due}.",
        "Every second you spend on {activity} is a second your career dies a little.",
        "Your procrastination score is {score}. That's not a high score you want.",
        "If procrastination was an Olympic sport, you'd have the gold. But it's NOT. WORK.",
    ],
    ShameLevel.NUCLEAR_OPTION: [
        "☢️ NUCLEAR OPTION ACTIVATED. Preparing mom email in 5 minutes unless you START WORKING.",
        "☢️ I'm posting your procrastination stats to team Discord. You have 60 seconds.",
        "☢️ DEFCON 1. Score: {score}/100. Mom email: ARMED. Discord shame: IMMINENT.",
        "☢️ This is your FINAL warning. {task} is due {due}. Mom gets an email in 5 min.",
        "☢️ I have composed a detailed email to your mother about your {duration} on {activity}. Send in 5 min.",
        "☢️ YOUR PROCRASTINATION SCORE HIT {score}. The shame protocols have been activated.",
        "☢️ SHAME LEVEL: MAXIMUM. All channels will be notified. Your legacy of laziness ends NOW.",
        "☢️ I have screenshots. I have timestamps. I have your mom's email. Choose wisely.",
    ],
}

POSITIVE_MESSAGES = [
    "🎉 Incredible! You completed a task! The legends were true - you CAN actually work!",
    "⭐ Look at you being all productive! Who IS this person?!",
    "🏆 Task done! Your procrastination score just dropped. Keep it up!",
    "💪 Another task crushed. Your future self just sent a thank you card.",
    "🌟 Wait, is that... PRODUCTIVITY?! I thought I'd never see the day!",
    "🦸 The hero we didn't think we had. Task completed. Respect.",
    "✅ Task complete! See? That wasn't so hard. (Don't let it go to your head.)",
    "🎊 REDEMPTION ARC! From procrastinator to producer. Beautiful.",
]

STREAK_MESSAGES = [
    "🔥 {minutes} minutes of focus! Don't you dare touch that phone.",
    "⚡ {minutes} minute focus streak! This is the longest I've seen you work!",
    "💎 {minutes} minutes! You're in the zone. I'll keep quiet... for now.",
    "🎵 {minutes} minutes of pure flow. *chef's kiss*",
]

CREATIVE_EXCUSES = [
    "I was doing competitive research on how competitors procrastinate.",
    "The YouTube algorithm was showing me content that could be tangentially related to work.",
    "I was testing my ability to context-switch rapidly. It's a skill!",
    "I was letting my subconscious solve the problem while I browsed Twitter.",
    "I was waiting for the code to compile. (There is no code to compile.)",
    "I was in a deep-work preparation phase. Very deep. Like, Mariana Trench deep.",
    "My rubber duck told me to take a break. I don't question the duck.",
    "I was practicing mindful avoidance - it's a legitimate technique I just invented.",
]


def template_placeholders(template: str) -> set[str]:
    return {field for _, field, _, _ in Formatter().parse(template) if field}


class MessageSelector:
    """Composes shame messages. ``rng`` decides which template is used."""

    def __init__(self, rng: Optional[random.Random] = None, clock: Optional[Clock] = None):
        self.rng = rng or random.Random()
        self.clock = clock or SystemClock()

    def select(
        self,
        snapshot: ScoreSnapshot,
        tasks: Sequence[Task],
        activities: Sequence[Activity],
        switches: int = 0,
    ) -> ShameMessage:
        level = ShameLevel(snapshot.shame_level)
        template = self.rng.choice(MESSAGE_TEMPLATES[level])
        values = self.placeholder_values(snapshot, tasks, activities, switches)
        return ShameMessage(
            level=level,
            message=template.format(**values),
            emoji=shame_level_emoji(level),
            action=determine_action(level),
            urgency=determine_urgency(level),
            generated_at=self.clock.now(),
        )

    def placeholder_values(
        self,
        snapshot: ScoreSnapshot,
        tasks: Sequence[Task],
        activities: Sequence[Activity],
        switches: int = 0,
    ) -> Dict[str, str]:
        now = self.clock.now()
        wasted = sorted(
            (a for a in activities if is_wasted(a.category)),
            key=lambda a: a.duration_minutes,
            reverse=True,
        )
        wasted_minutes = sum(a.duration_minutes for a in wasted)

        overdue = sorted(
            (t for t in tasks if not t.is_done and t.due is not None and t.due < now),
            key=lambda t: t.due,
        )
        open_tasks = [t for t in tasks if not t.is_done]
        urgent = overdue[0] if overdue else (open_tasks[0] if open_tasks else None)

        return {
            "activity": wasted[0].title if wasted else FALLBACK_ACTIVITY,
            "time": format_wasted_time(wasted_minutes or FALLBACK_WASTED_MINUTES),
            "task": urgent.title if urgent else FALLBACK_TASK,
            "due": self._due_text(tasks, overdue, now),
            "tasks": str(len(overdue) or len(open_tasks)),
            "score": str(snapshot.score),
            "switches": str(switches),
            "duration": format_duration(wasted_minutes),
        }

    @staticmethod
    def _due_text(tasks: Sequence[Task], overdue: Sequence[Task], now: datetime) -> str:
        upcoming = sorted(
            (t for t in tasks if not t.is_done and t.due is not None and t.due > now),
            key=lambda t: t.due,
        )
        if upcoming:
            hours = (upcoming[0].due - now).total_seconds() / 3600
            if hours < 1:
                return f"in {max(1, round_half_up(hours * 60))} minutes"
            if hours < 24:
                return f"in {round_half_up(hours)} hours"
            return f"in {round_half_up(hours / 24)} days"
        if overdue:
            hours_ago = (now - overdue[0].due).total_seconds() / 3600
            return f"{round_half_up(hours_ago)} hours AGO"
        return FALLBACK_DUE

    def positive(self, context: Optional[str] = None) -> ShameMessage:
        message = self.rng.choice(POSITIVE_MESSAGES)
        if context:
            message = f"{message} ({context})"
        return self._gentle(message, "🎉")

    def focus_streak(self, minutes: float) -> ShameMessage:
        template = self.rng.choice(STREAK_MESSAGES)
        return self._gentle(template.format(minutes=round_half_up(minutes)), "🔥")

    def creative_excuse(self) -> str:
        return self.rng.choice(CREATIVE_EXCUSES)

    def _gentle(self, message: str, emoji: str) -> ShameMessage:
        return ShameMessage(
            level=ShameLevel.GENTLE_NUDGE,
            message=message,
            emoji=emoji,
            action="dashboard_update",
            urgency="low",
            generated_at=self.clock.now(),
        )


def redemption_arc(previous_score: int, current_score: int, tasks_completed: int) -> str:
    drop = previous_score - current_score
    if drop >= 50:
        return (
            f"🦸 EPIC REDEMPTION ARC: Score dropped {drop} points! From {previous_score} to "
            f"{current_score}! {tasks_completed} tasks crushed! The comeback of the century!"
        )
    if drop >= 30:
        return (
            f"⭐ REDEMPTION ARC: Score dropped {drop} points! Going from {previous_score} to "
            f"{current_score}. {tasks_completed} tasks done. The prodigal worker returns!"
        )
    if drop >= 15:
        return (
            f"📈 Mini redemption: Score improved by {drop} points. {tasks_completed} tasks "
            "completed. Baby steps, but we'll take it."
        )
    return f"🌱 Small improvement detected. Score: {current_score}. Keep going, don't stop now!"


def disable_attempt_shame(total_attempts: int) -> str:
    if total_attempts <= 0:
        return ""
    plural = "s" if total_attempts > 1 else ""
    messages = [
        f"You've tried to disable the Shame Engine {total_attempts} time{plural}. That's not productive either.",
        f"Disable attempt #{total_attempts} logged. Your desperation is being tracked. 📊",
        "The Shame Engine doesn't turn off. The Shame Engine just gets stronger. 💪",
        f"{total_attempts} disable attempts. Imagine if you spent that energy on actual work.",
        f"I've seen {total_attempts} disable attempts. Want to know what I haven't seen? Completed tasks.",
    ]
    return messages[min(total_attempts, len(messages)) - 1]


__all__ = [
    "PLACEHOLDERS",
    "MESSAGE_TEMPLATES",
    "template_placeholders",
    "MessageSelector",
    "redemption_arc",
    "disable_attempt_shame",
]
