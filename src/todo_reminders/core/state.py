# src/todo_reminders/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_scheduler import LocalNotifier, NotificationBehavior
from .ports import TaskRepo


@dataclass
class AppState:
    # Settings object (Settings in production, SimpleNamespace in tests).
    settings: object

    registry: TaskRepo
    notifier: LocalNotifier
    behavior: NotificationBehavior
