from __future__ import annotations

import asyncio
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from typing import Optional

from shame_engine.config import Settings
from shame_engine.countdown import MomEmailConfig
from shame_engine.formatting import format_duration
from shame_engine.logging_utils import log_event
from shame_engine.models import ProductivityReport, ScoreSnapshot

WARNING_SUBJECT = "Gentle reminder about {user}'s time management"
NUCLEAR_SUBJECT = "🚨 I'm concerned about {user}'s work ethic"

FOOTER_STYLE = "color: #666; font-size: 12px;"
CELL_STYLE = "padding: 8px; border-bottom: 1px solid #fca5a5;"


@dataclass(slots=True, frozen=True)
class SmtpConfig:
    host: str = "smtp.gmail.com"
    port: int = 587
    user: Optional[str] = None
    password: Optional[str] = None
    sender: str = "shame-engine@productivity.ai"
    starttls: bool = True
    timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpConfig":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password.get_secret_value() if settings.smtp_password else None,
            sender=settings.smtp_from,
            starttls=settings.smtp_starttls,
        )


def render_warning_html(user_name: str, score: int) -> str:
    user = escape(user_name)
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2 style="color: #f59e0b;">⚠️ Gentle Heads Up About {user}</h2>
  <p>Dear Parent,</p>
  <p>This is an automated message from the <strong>Procrastination Shame Engine</strong>,
  a productivity tool that {user} voluntarily installed.</p>
  <p>{user} seems to be having some trouble with time management today.</p>
  <div style="background: #fef3cd; border: 1px solid #ffc107; border-radius: 8px; padding: 15px; margin: 15px 0;">
    <p><strong>Current Procrastination Score:</strong> {score}/100</p>
    <p>This is a preliminary warning. We're sure {user} will get back on track!</p>
  </div>
  <p style="{FOOTER_STYLE}">
    This email was sent because {user} set up the Procrastination Shame Engine
    and provided your email as their accountability partner. They can disable this at any time
    (after completing their tasks, of course 😊).
  </p>
</div>
"""


def render_nuclear_html(
    user_name: str,
    score: int,
    send_threshold: int,
    report: ProductivityReport,
) -> str:
    user = escape(user_name)
    rows = [
        ("Procrastination Score", f"{score}/100"),
        ("Tasks Completed Today", str(report.total_tasks_completed)),
        ("Tasks Overdue", str(report.total_tasks_overdue)),
        ("Time Productive", format_duration(report.total_minutes_productive)),
        ("Time Wasted", format_duration(report.total_minutes_wasted)),
    ]
    table = "\n".join(
        f'      <tr><td style="{CELL_STYLE}"><strong>{label}</strong></td>'
        f'<td style="{CELL_STYLE}">{escape(value)}</td></tr>'
        for label, value in rows
    )
    top_items = "".join(
        f"<li><strong>{escape(item.activity)}</strong> — {format_duration(item.total_minutes)} "
        f"({item.occurrences} times)</li>"
        for item in report.top_procrastination_activities[:5]
    )
    top_block = ""
    if top_items:
        top_block = f"""
  <div style="background: #fff7ed; border: 1px solid #f59e0b; border-radius: 8px; padding: 15px; margin: 15px 0;">
    <h3 style="margin-top: 0; color: #d97706;">🎯 What {user} Was Doing Instead of Working</h3>
    <ol>{top_items}</ol>
  </div>"""
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2 style="color: #ef4444;">🚨 Urgent: {user}'s Productivity Report</h2>
  <p>Dear Parent,</p>
  <p>We regret to inform you that {user}'s procrastination has reached
  <strong style="color: #ef4444;">critical levels</strong>.</p>
  <div style="background: #fee2e2; border: 2px solid #ef4444; border-radius: 8px; padding: 20px; margin: 15px 0;">
    <h3 style="margin-top: 0; color: #dc2626;">📊 Current Statistics</h3>
    <table style="width: 100%; border-collapse: collapse;">
{table}
    </table>
  </div>{top_block}
  <p>We believe in {user}'s potential. Sometimes they just need a gentle nudge...
  or a concerned phone call from a loved one. 😊</p>
  <p style="{FOOTER_STYLE}">
    This email was sent by the Procrastination Shame Engine because {user}'s
    procrastination score exceeded {send_threshold}/100 for an extended period.
    {user} willingly set this up and can disable it (after completing pending tasks).
  </p>
</div>
"""


class MomEmailNotifier:
    """Delivers the warning and nuclear emails. The countdown is acknowledged by the caller."""

    def __init__(self, config: MomEmailConfig, smtp: SmtpConfig):
        self.config = config
        self.smtp = smtp

    async def send_warning(self, snapshot: ScoreSnapshot) -> bool:
        subject = WARNING_SUBJECT.format(user=self.config.user_name)
        html = render_warning_html(self.config.user_name, snapshot.score)
        return await self._send(subject, html, kind="mom_email_warning")

    async def send_nuclear(self, snapshot: ScoreSnapshot, report: ProductivityReport) -> bool:
        subject = NUCLEAR_SUBJECT.format(user=self.config.user_name)
        html = render_nuclear_html(
            self.config.user_name, snapshot.score, self.config.send_threshold, report
        )
        return await self._send(subject, html, kind="mom_email_nuclear")

    def build_message(self, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.smtp.sender
        message["To"] = self.config.mom_email
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    async def _send(self, subject: str, html: str, *, kind: str) -> bool:
        message = self.build_message(subject, html)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            log_event({"status": "error", "kind": kind, "error": str(exc)})
            return False
        log_event({"status": "success", "kind": kind, "to": self.config.mom_email})
        return True

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.smtp.host, self.smtp.port, timeout=self.smtp.timeout_seconds) as client:
            if self.smtp.starttls:
                client.starttls()
            if self.smtp.user and self.smtp.password:
                client.login(self.smtp.user, self.smtp.password)
            client.send_message(message)


__all__ = ["SmtpConfig", "MomEmailNotifier", "render_warning_html", "render_nuclear_html"]
