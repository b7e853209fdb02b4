# src/todo_reminders/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the notifier and the task registry into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import AlertFunc
from ..core.state import AppState
from ..tasks.task_scheduler import LocalNotifier, NotificationBehavior
from ..tasks.task_store import TaskRegistry

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, alert: AlertFunc | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    notifier = LocalNotifier()
    registry = TaskRegistry(
        notifier,
        alert=alert,
        require_time=bool(getattr(settings, "require_time", False)),
        block_on_reminder_failure=bool(getattr(settings, "block_on_reminder_failure", False)),
        reminder_title=str(getattr(settings, "reminder_title", "Task reminder")),
    )
    behavior = NotificationBehavior(
        show_alert=bool(getattr(settings, "notify_alert", True)),
        play_sound=bool(getattr(settings, "notify_sound", True)),
        set_badge=bool(getattr(settings, "notify_badge", True)),
    )

    logger.debug("AppState created (require_time=%s)", getattr(settings, "require_time", False))
    return AppState(settings=settings, registry=registry, notifier=notifier, behavior=behavior)
