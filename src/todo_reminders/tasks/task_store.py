# src/todo_reminders/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ..core.ports import AlertFunc, NotificationScheduler, TaskListener
from .reminders import DEFAULT_REMINDER_TITLE, cancel_reminder, schedule_reminder
from .task_models import ScheduleOk, Task

logger = logging.getLogger(__name__)

VALIDATION_TITLE = "Fill in all fields"
MSG_EMPTY_TEXT = "Enter the task text"
MSG_MISSING_TIME = "Specify a time for the task"
REMINDER_FAILED_TITLE = "Reminder could not be scheduled"


def _log_alert(title: str, messages: list[str]) -> None:
    logger.warning("%s: %s", title, "; ".join(messages))


class TaskRegistry:
    """
    In-memory task registry.

    State is an ordered tuple of immutable Task objects. Every mutation
    publishes a new tuple in one assignment, so readers (and listeners)
    only ever see complete snapshots.

    Reminders:
    - add() resolves the reminder handle BEFORE the task is published;
    - delete() cancels the reminder BEFORE the task is removed.

    Construct once in the composition root and inject it into the
    presentation layer; there is no module-level instance.
    """

    def __init__(
        self,
        scheduler: NotificationScheduler,
        *,
        alert: AlertFunc | None = None,
        require_time: bool = False,
        block_on_reminder_failure: bool = False,
        reminder_title: str = DEFAULT_REMINDER_TITLE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._scheduler = scheduler
        self._alert = alert or _log_alert
        self._require_time = require_time
        self._block_on_reminder_failure = block_on_reminder_failure
        self._reminder_title = reminder_title
        self._clock = clock

        self._tasks: tuple[Task, ...] = ()
        self._listeners: list[TaskListener] = []
        self._last_id_ms = 0

    # ---- read side ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """Register a listener for new snapshots. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- internals ----

    def _next_id(self) -> str:
        # Millisecond timestamp, bumped when two tasks land in the same millisecond.
        now_ms = int(self._clock() * 1000)
        self._last_id_ms = max(now_ms, self._last_id_ms + 1)
        return str(self._last_id_ms)

    def _publish(self, tasks: tuple[Task, ...]) -> None:
        self._tasks = tasks
        for listener in list(self._listeners):
            try:
                listener(tasks)
            except Exception:
                logger.exception("Task listener failed")

    # ---- mutations ----

    async def add(self, text: str, scheduled_time: datetime | None = None) -> bool:
        clean = (text or "").strip()

        errors: list[str] = []
        if not clean:
            errors.append(MSG_EMPTY_TEXT)
        if self._require_time and scheduled_time is None:
            errors.append(MSG_MISSING_TIME)

        if errors:
            self._alert(VALIDATION_TITLE, errors)
            return False

        task = Task(id=self._next_id(), text=clean, scheduled_time=scheduled_time)

        if scheduled_time is not None:
            result = await schedule_reminder(self._scheduler, task, title=self._reminder_title)
            if isinstance(result, ScheduleOk):
                task = replace(task, reminder_handle=result.handle)
            else:
                logger.warning("Reminder not scheduled task_id=%s reason=%s", task.id, result.reason)
                if self._block_on_reminder_failure:
                    self._alert(REMINDER_FAILED_TITLE, [result.reason, "The task was not added."])
                    return False
                self._alert(REMINDER_FAILED_TITLE, [result.reason, "The task was added without a reminder."])

        self._publish((*self._tasks, task))
        logger.info(
            "Task added id=%s scheduled=%s reminder=%s",
            task.id,
            task.scheduled_time,
            task.reminder_handle,
        )
        return True

    def toggle(self, task_id: str) -> None:
        if self.get(task_id) is None:
            return

        self._publish(
            tuple(replace(t, completed=not t.completed) if t.id == task_id else t for t in self._tasks)
        )
        logger.debug("Task toggled id=%s", task_id)

    async def delete(self, task_id: str) -> None:
        task = self.get(task_id)
        if task is None:
            return

        if task.reminder_handle:
            try:
                await cancel_reminder(self._scheduler, task.reminder_handle)
            except Exception:
                # Best-effort: a stale reminder must not keep the task alive.
                logger.exception(
                    "Reminder cancel failed task_id=%s handle=%s", task_id, task.reminder_handle
                )

        # Filter the current snapshot, not the one captured before the await.
        remaining = tuple(t for t in self._tasks if t.id != task_id)
        if len(remaining) != len(self._tasks):
            self._publish(remaining)
            logger.info("Task deleted id=%s", task_id)
