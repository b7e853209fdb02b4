# src/todo_reminders/tasks/reminders.py

"""
Reminder helpers shared by the task registry.

The registry never talks to the notification service directly:
- build_trigger() picks the fire policy for a scheduled time,
- schedule_reminder() wraps the service call into a ScheduleResult,
- cancel_reminder() drops a pending reminder by handle.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..core.ports import NotificationScheduler
from .task_models import (
    CalendarTrigger,
    FirePolicy,
    ImmediateTrigger,
    NotificationContent,
    NotificationPriority,
    ScheduleFailed,
    ScheduleOk,
    ScheduleResult,
    Task,
)

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_TITLE = "Task reminder"


def to_local_naive(dt: datetime) -> datetime:
    """Aware datetimes are converted to local wall-clock time; naive ones are taken as local."""
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def build_trigger(scheduled_time: datetime, now: datetime | None = None) -> FirePolicy:
    when = to_local_naive(scheduled_time)
    current = to_local_naive(now) if now is not None else datetime.now()

    if when <= current:
        return ImmediateTrigger()

    return CalendarTrigger(
        year=when.year,
        month=when.month,
        day=when.day,
        hour=when.hour,
        minute=when.minute,
    )


def build_content(task: Task, title: str = DEFAULT_REMINDER_TITLE) -> NotificationContent:
    return NotificationContent(
        title=title,
        body=task.text,
        data={"task_id": task.id},
        sound=True,
        priority=NotificationPriority.HIGH,
    )


async def schedule_reminder(
    scheduler: NotificationScheduler,
    task: Task,
    *,
    title: str = DEFAULT_REMINDER_TITLE,
    now: datetime | None = None,
) -> ScheduleResult:
    """
    Register a one-shot reminder for task.scheduled_time.

    Never raises for scheduler failures: they are returned as ScheduleFailed
    so the caller decides whether the task is still created.
    """
    if task.scheduled_time is None:
        return ScheduleFailed("no scheduled time")

    trigger = build_trigger(task.scheduled_time, now)
    content = build_content(task, title)

    try:
        handle = await scheduler.schedule(content, trigger)
    except Exception as e:
        logger.exception("Reminder scheduling failed task_id=%s", task.id)
        return ScheduleFailed(str(e) or e.__class__.__name__)

    if not handle:
        return ScheduleFailed("scheduler returned an empty handle")

    logger.debug("Reminder scheduled task_id=%s handle=%s trigger=%s", task.id, handle, trigger)
    return ScheduleOk(str(handle))


async def cancel_reminder(scheduler: NotificationScheduler, handle: str) -> None:
    await scheduler.cancel(handle)
    logger.debug("Reminder cancelled handle=%s", handle)
