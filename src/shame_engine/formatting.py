"""Human-readable renderings of durations and scores."""
from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def format_duration(minutes: float) -> str:
    if minutes < 1:
        return "less than a minute"
    if minutes < 60:
        rounded = round_half_up(minutes)
        return f"{rounded} minute{'' if rounded == 1 else 's'}"
    hours = int(minutes // 60)
    mins = round_half_up(minutes % 60)
    if mins == 60:
        hours, mins = hours + 1, 0
    if mins == 0:
        return f"{hours} hour{'' if hours == 1 else 's'}"
    return f"{hours}h {mins}m"


def format_wasted_time(minutes: float) -> str:
    """Shaming rendition of wasted minutes."""

    if minutes < 5:
        return "a few minutes"
    if minutes < 30:
        return f"{round_half_up(minutes)} precious minutes"
    if minutes < 60:
        return "nearly an hour of your life"
    if minutes < 120:
        return f"over an hour ({round_half_up(minutes)} minutes!)"
    return f"{int(minutes // 60)}+ hours of your ONE life on this earth"


def progress_bar(value: float, maximum: float, length: int = 20) -> str:
    filled = round_half_up(clamp(value / maximum, 0, 1) * length) if maximum else 0
    return "█" * filled + "░" * (length - filled)


__all__ = ["round_half_up", "clamp", "format_duration", "format_wasted_time", "progress_bar"]
