"""Maps shame levels to their consequence and presentation."""
from __future__ import annotations

from typing import Dict

from shame_engine.models import ShameLevel, SuggestedAction, Urgency

_ACTIONS: Dict[ShameLevel, SuggestedAction] = {
    ShameLevel.GENTLE_NUDGE: "dashboard_update",
    ShameLevel.PASSIVE_AGGRESSIVE: "desktop_notification",
    ShameLevel.DIRECT_CALLOUT: "discord_post",
    ShameLevel.AGGRESSIVE_SHAME: "discord_post",
    ShameLevel.NUCLEAR_OPTION: "mom_email",
}

_URGENCIES: Dict[ShameLevel, Urgency] = {
    ShameLevel.GENTLE_NUDGE: "low",
    ShameLevel.PASSIVE_AGGRESSIVE: "medium",
    ShameLevel.DIRECT_CALLOUT: "high",
    ShameLevel.AGGRESSIVE_SHAME: "critical",
    ShameLevel.NUCLEAR_OPTION: "nuclear",
}

_NAMES: Dict[ShameLevel, str] = {
    ShameLevel.GENTLE_NUDGE: "Gentle Nudge",
    ShameLevel.PASSIVE_AGGRESSIVE: "Passive Aggressive",
    ShameLevel.DIRECT_CALLOUT: "Direct Call-Out",
    ShameLevel.AGGRESSIVE_SHAME: "Aggressive Shame",
    ShameLevel.NUCLEAR_OPTION: "☢️ NUCLEAR OPTION ☢️",
}

_EMOJIS: Dict[ShameLevel, str] = {
    ShameLevel.GENTLE_NUDGE: "😊",
    ShameLevel.PASSIVE_AGGRESSIVE: "🙄",
    ShameLevel.DIRECT_CALLOUT: "😤",
    ShameLevel.AGGRESSIVE_SHAME: "🔥",
    ShameLevel.NUCLEAR_OPTION: "☢️",
}

# Discord embed colours.
_COLORS: Dict[ShameLevel, int] = {
    ShameLevel.GENTLE_NUDGE: 0x22C55E,
    ShameLevel.PASSIVE_AGGRESSIVE: 0xF59E0B,
    ShameLevel.DIRECT_CALLOUT: 0xF97316,
    ShameLevel.AGGRESSIVE_SHAME: 0xEF4444,
    ShameLevel.NUCLEAR_OPTION: 0x7C3AED,
}


def determine_action(level: ShameLevel) -> SuggestedAction:
    """Externally visible consequence of reaching ``level``."""

    return _ACTIONS[ShameLevel(level)]


def determine_urgency(level: ShameLevel) -> Urgency:
    return _URGENCIES[ShameLevel(level)]


def shame_level_name(level: ShameLevel) -> str:
    return _NAMES[ShameLevel(level)]


def shame_level_emoji(level: ShameLevel) -> str:
    return _EMOJIS[ShameLevel(level)]


def shame_level_color(level: ShameLevel) -> int:
    return _COLORS[ShameLevel(level)]


__all__ = [
    "determine_action",
    "determine_urgency",
    "shame_level_name",
    "shame_level_emoji",
    "shame_level_color",
]
