# src/todo_reminders/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (built once in the composition root).
- Nothing required at import time; every variable has a default.
- Malformed values fall back to defaults instead of failing startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Task validation ----
    require_time: bool
    block_on_reminder_failure: bool

    # ---- Reminders ----
    reminder_title: str
    notifier_interval_seconds: float
    notifier_retry_seconds: float

    # ---- Notification handler policy ----
    notify_alert: bool
    notify_sound: bool
    notify_badge: bool

    @staticmethod
    def from_env(*, load_env_file: bool = True) -> Settings:
        if load_env_file:
            load_dotenv(override=False)

        app_name = _env(_k("APP_NAME"), "todo").strip() or "todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))

        require_time = _env_bool(_k("REQUIRE_TIME"), False)
        block_on_reminder_failure = _env_bool(_k("BLOCK_ON_REMINDER_FAILURE"), False)

        reminder_title = _env(_k("REMINDER_TITLE"), "Task reminder").strip() or "Task reminder"
        notifier_interval_seconds = _env_float(_k("NOTIFIER_INTERVAL_SECONDS"), 1.0)
        notifier_retry_seconds = _env_float(_k("NOTIFIER_RETRY_SECONDS"), 30.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            require_time=require_time,
            block_on_reminder_failure=block_on_reminder_failure,
            reminder_title=reminder_title,
            notifier_interval_seconds=notifier_interval_seconds,
            notifier_retry_seconds=notifier_retry_seconds,
            notify_alert=_env_bool(_k("NOTIFY_ALERT"), True),
            notify_sound=_env_bool(_k("NOTIFY_SOUND"), True),
            notify_badge=_env_bool(_k("NOTIFY_BADGE"), True),
        )


def get_settings() -> Settings:
    return Settings.from_env()
