"""Append-only logging helpers for engine events."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from shame_engine.config import get_settings

LOG_FILE_NAME = "engine_events.jsonl"
LOGGER_NAME = "shame_engine"


def _setup_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


LOGGER = _setup_logger()


def _log_path() -> Path:
    settings = get_settings()
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / LOG_FILE_NAME


def log_event(data: Mapping[str, Any]) -> None:
    """Append a JSON event to the log file and emit console output."""

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **data,
    }
    try:
        path = _log_path()
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload, ensure_ascii=False, default=str))
            handle.write("\n")
    except OSError:
        # Event log is best-effort; the engine keeps running without it.
        pass

    status = payload.get("status", "info")
    kind = payload.get("kind", "event")
    details = " ".join(
        f"{key}={value}"
        for key, value in payload.items()
        if key not in {"timestamp", "status", "kind"}
    )
    if status == "error":
        LOGGER.error("%s | %s", kind, details)
    else:
        LOGGER.info("%s | %s", kind, details)


__all__ = ["log_event", "LOGGER", "LOGGER_NAME"]
