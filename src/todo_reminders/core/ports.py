# src/todo_reminders/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the notification backend and the presentation layer swappable
and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Protocol

from ..tasks.task_models import FirePolicy, NotificationContent, Task

TaskListener = Callable[[tuple[Task, ...]], None]
AlertFunc = Callable[[str, list[str]], None]
# Alert: (title, messages) shown to the user by the presentation layer.


class NotificationScheduler(Protocol):
    """
    Local notification service (OS-level on a device, in-process here).

    schedule() registers a one-shot notification and returns an opaque handle.
    cancel() drops a pending notification; unknown handles are ignored.
    """

    def schedule(self, content: NotificationContent, trigger: FirePolicy) -> Awaitable[str]: ...

    def cancel(self, handle: str) -> Awaitable[None]: ...


class OutboundMessenger(Protocol):
    """
    Presentation-side port: how the notifier shows a delivered reminder.
    """

    def send_text(
            self,
            *,
            text: str,
            title: str | None = None,
            sound: bool = False,
    ) -> Awaitable[None]: ...


class TaskRepo(Protocol):
    @property
    def tasks(self) -> tuple[Task, ...]: ...

    def get(self, task_id: str) -> Task | None: ...

    async def add(self, text: str, scheduled_time: datetime | None = None) -> bool: ...

    def toggle(self, task_id: str) -> None: ...

    async def delete(self, task_id: str) -> None: ...

    def subscribe(self, listener: TaskListener) -> Callable[[], None]: ...
