# src/todo_reminders/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class NotificationPriority(StrEnum):
    DEFAULT = "default"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    text: str
    completed: bool = False
    scheduled_time: datetime | None = None
    reminder_handle: str | None = None


@dataclass(frozen=True, slots=True)
class ImmediateTrigger:
    """Deliver as soon as possible (the scheduled time is already past)."""


@dataclass(frozen=True, slots=True)
class CalendarTrigger:
    """
    One-shot trigger in local wall-clock time.

    Minute granularity: seconds of the scheduled time are dropped.
    month is 1-based.
    """

    year: int
    month: int
    day: int
    hour: int
    minute: int

    def to_datetime(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute)


FirePolicy = ImmediateTrigger | CalendarTrigger


@dataclass(frozen=True, slots=True)
class NotificationContent:
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)
    sound: bool = True
    priority: NotificationPriority = NotificationPriority.HIGH


@dataclass(frozen=True, slots=True)
class ScheduleOk:
    handle: str


@dataclass(frozen=True, slots=True)
class ScheduleFailed:
    reason: str


ScheduleResult = ScheduleOk | ScheduleFailed
