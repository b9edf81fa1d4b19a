"""Helpers for dealing with timezone-aware datetimes."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo


def get_timezone(tz_name: str) -> ZoneInfo:
    """Return ZoneInfo instance with graceful fallback to UTC."""

    try:
        return ZoneInfo(tz_name)
    except Exception:
        return ZoneInfo("UTC")


def as_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock bound to a timezone; day boundaries follow that zone."""

    def __init__(self, tz: ZoneInfo | None = None):
        self.tz = tz or ZoneInfo("UTC")

    def now(self) -> datetime:
        return datetime.now(tz=self.tz)


__all__ = [
    "get_timezone",
    "as_aware",
    "start_of_day",
    "Clock",
    "SystemClock",
]
