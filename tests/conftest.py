# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_reminders.core.state import AppState
from todo_reminders.tasks.task_scheduler import LocalNotifier, NotificationBehavior
from todo_reminders.tasks.task_store import TaskRegistry

from .fakes import FakeNotificationScheduler


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the composition root.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        require_time=False,
        block_on_reminder_failure=False,
        reminder_title="Task reminder",
        notifier_interval_seconds=0.01,
        notifier_retry_seconds=0.01,
        notify_alert=True,
        notify_sound=True,
        notify_badge=True,
    )


@pytest.fixture()
def scheduler() -> FakeNotificationScheduler:
    return FakeNotificationScheduler()


@pytest.fixture()
def alerts() -> list[tuple[str, list[str]]]:
    return []


@pytest.fixture()
def registry(scheduler: FakeNotificationScheduler, alerts) -> TaskRegistry:
    return TaskRegistry(scheduler, alert=lambda title, msgs: alerts.append((title, msgs)))


@pytest.fixture()
def state(settings: SimpleNamespace, registry: TaskRegistry) -> AppState:
    """
    AppState wired with the recording scheduler.

    The LocalNotifier is real but unused by the registry here; commands
    only read its counters.
    """
    return AppState(
        settings=settings,
        registry=registry,
        notifier=LocalNotifier(),
        behavior=NotificationBehavior(),
    )
