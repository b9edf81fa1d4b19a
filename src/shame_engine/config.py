"""Application configuration and settings management."""
from __future__ import annotations

from pathlib import Path
from typing import Annotated, List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_WORK_DAYS = [1, 2, 3, 4, 5]


class Settings(BaseSettings):
    """Project-level settings loaded from environment variables/.env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    telegram_bot_token: Optional[SecretStr] = Field(None, alias="TELEGRAM_BOT_TOKEN")
    telegram_chat_id: Optional[int] = Field(None, alias="TELEGRAM_CHAT_ID")

    user_name: str = Field("Procrastinator", alias="SHAME_USER_NAME")
    timezone: str = Field("UTC", alias="SHAME_TIMEZONE")
    work_hours_start: int = Field(9, ge=0, le=23, alias="SHAME_WORK_START")
    work_hours_end: int = Field(17, ge=1, le=24, alias="SHAME_WORK_END")
    work_days: Annotated[List[int], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_WORK_DAYS), alias="SHAME_WORK_DAYS"
    )
    polling_interval_minutes: int = Field(5, ge=1, alias="SHAME_POLLING_INTERVAL")
    focus_mode_enabled: bool = Field(False, alias="SHAME_FOCUS_MODE")

    discord_webhook_url: Optional[str] = Field(None, alias="DISCORD_WEBHOOK_URL")

    mom_email: Optional[str] = Field(None, alias="MOM_EMAIL")
    mom_email_enabled: bool = Field(True, alias="MOM_EMAIL_ENABLED")
    mom_warning_threshold: int = Field(85, ge=0, le=100, alias="MOM_WARNING_THRESHOLD")
    mom_send_threshold: int = Field(95, ge=0, le=100, alias="MOM_SEND_THRESHOLD")
    mom_cooldown_minutes: int = Field(60, ge=0, alias="MOM_COOLDOWN_MINUTES")
    mom_countdown_minutes: int = Field(5, ge=1, alias="MOM_COUNTDOWN_MINUTES")

    smtp_host: str = Field("smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(587, alias="SMTP_PORT")
    smtp_user: Optional[str] = Field(None, alias="SMTP_USER")
    smtp_password: Optional[SecretStr] = Field(None, alias="SMTP_PASS")
    smtp_from: str = Field("shame-engine@productivity.ai", alias="SMTP_FROM")
    smtp_starttls: bool = Field(True, alias="SMTP_STARTTLS")

    log_dir: Path = Field(Path("logs"), alias="LOG_DIR")

    @field_validator("work_days", mode="before")
    @classmethod
    def _split_work_days(cls, value):
        if isinstance(value, str):
            return [int(part) for part in value.split(",") if part.strip()]
        return value


_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:
    """Return cached settings instance."""

    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings()
    return _SETTINGS


__all__ = ["Settings", "get_settings"]
