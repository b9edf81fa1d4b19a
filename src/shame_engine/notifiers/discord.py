from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

import aiohttp

from shame_engine.escalation import shame_level_color, shame_level_emoji, shame_level_name
from shame_engine.formatting import format_duration, progress_bar, round_half_up
from shame_engine.logging_utils import log_event
from shame_engine.models import ProductivityReport, ScoreSnapshot, ShameLevel, ShameMessage

TREND_LABELS = {
    "improving": "📉 Improving",
    "worsening": "📈 Worsening",
    "stable": "➡️ Stable",
}


class DiscordNotifier:
    """Posts shame embeds to a Discord channel webhook."""

    def __init__(self, webhook_url: str, user_name: str, timeout_seconds: float = 15.0) -> None:
        self._webhook_url = webhook_url
        self._user_name = user_name
        self._timeout_seconds = timeout_seconds

    async def post_shame(self, message: ShameMessage, snapshot: ScoreSnapshot) -> bool:
        return await self._post(self.build_shame_payload(message, snapshot), kind="discord_shame")

    async def post_report(self, report: ProductivityReport) -> bool:
        return await self._post(self.build_report_payload(report), kind="discord_report")

    def build_shame_payload(self, message: ShameMessage, snapshot: ScoreSnapshot) -> Dict[str, Any]:
        level = ShameLevel(message.level)
        fields: List[Dict[str, Any]] = [
            {
                "name": "📊 Procrastination Score",
                "value": f"**{snapshot.score}/100** {progress_bar(snapshot.score, 100, 15)}",
                "inline": True,
            },
            {"name": "📈 Trend", "value": TREND_LABELS[snapshot.trend], "inline": True},
            {"name": "🔥 Shame Level", "value": shame_level_name(level), "inline": True},
        ]
        if level >= ShameLevel.DIRECT_CALLOUT:
            breakdown = snapshot.breakdown
            fields.extend(
                [
                    {
                        "name": "⏰ Time Wasted Ratio",
                        "value": f"{round_half_up(breakdown.time_wasted_ratio)}%",
                        "inline": True,
                    },
                    {
                        "name": "⚠️ Deadline Pressure",
                        "value": f"{round_half_up(breakdown.deadline_proximity)}%",
                        "inline": True,
                    },
                    {
                        "name": "📋 Task Completion",
                        "value": f"{round_half_up(100 - breakdown.task_completion_ratio)}%",
                        "inline": True,
                    },
                ]
            )
        embed = {
            "title": f"{shame_level_emoji(level)} {shame_level_name(level)} — {self._user_name}",
            "description": message.message,
            "color": shame_level_color(level),
            "fields": fields,
            "footer": {"text": "Procrastination Shame Engine — Your productivity, publicly judged."},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return {"username": "Shame Engine 🔔", "embeds": [embed]}

    def build_report_payload(self, report: ProductivityReport) -> Dict[str, Any]:
        top = "\n".join(
            f"{idx}. **{item.activity}** — {format_duration(item.total_minutes)} ({item.occurrences}x)"
            for idx, item in enumerate(report.top_procrastination_activities[:5], start=1)
        )
        fields = [
            {"name": "📊 Average Score", "value": f"**{round_half_up(report.average_score)}/100**", "inline": True},
            {"name": "🏆 Best Score", "value": f"{report.best_score}/100", "inline": True},
            {"name": "💀 Worst Score", "value": f"{report.worst_score}/100", "inline": True},
            {"name": "✅ Tasks Completed", "value": str(report.total_tasks_completed), "inline": True},
            {"name": "⏰ Tasks Overdue", "value": str(report.total_tasks_overdue), "inline": True},
            {"name": "⏱️ Productive Time", "value": format_duration(report.total_minutes_productive), "inline": True},
            {"name": "🗑️ Wasted Time", "value": format_duration(report.total_minutes_wasted), "inline": True},
            {"name": "🏆 Top Procrastination Activities", "value": top or "None (suspicious...)", "inline": False},
        ]
        embed = {
            "title": f"📋 {report.period.capitalize()} Procrastination Report — {self._user_name}",
            "description": f'Here\'s how {self._user_name} "worked":',
            "color": 0x7C3AED if report.average_score > 80 else 0xF59E0B,
            "fields": fields,
            "footer": {"text": "Procrastination Shame Engine — Tomorrow will be different. (It won't.)"},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return {"username": "Shame Engine 📋", "embeds": [embed]}

    async def _post(self, payload: Dict[str, Any], *, kind: str) -> bool:
        timeout = aiohttp.ClientTimeout(total=self._timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self._webhook_url, json=payload) as response:
                    response.raise_for_status()
        except (aiohttp.ClientError, TimeoutError) as exc:
            log_event({"status": "error", "kind": kind, "error": str(exc)})
            return False
        log_event({"status": "success", "kind": kind})
        return True


__all__ = ["DiscordNotifier"]
