from pathlib import Path

from shame_engine import config
from shame_engine.config import Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("SHAME_WORK_DAYS", "MOM_EMAIL", "SHAME_TIMEZONE", "TELEGRAM_BOT_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.work_days == [1, 2, 3, 4, 5]
    assert settings.timezone == "UTC"
    assert settings.mom_email is None
    assert settings.mom_warning_threshold == 85
    assert settings.mom_send_threshold == 95
    assert settings.telegram_bot_token is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SHAME_WORK_DAYS", "0,6")
    monkeypatch.setenv("MOM_EMAIL", "mom@example.com")
    monkeypatch.setenv("SMTP_PASS", "hunter2")
    monkeypatch.setenv("LOG_DIR", "/tmp/shame-logs")
    settings = Settings(_env_file=None)
    assert settings.work_days == [0, 6]
    assert settings.mom_email == "mom@example.com"
    assert settings.smtp_password.get_secret_value() == "hunter2"
    assert "hunter2" not in repr(settings)
    assert settings.log_dir == Path("/tmp/shame-logs")


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setattr(config, "_SETTINGS", None)
    assert get_settings() is get_settings()
