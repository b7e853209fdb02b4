# src/todo_reminders/tasks/task_scheduler.py

"""
Local notification service.

LocalNotifier implements the NotificationScheduler port in-process:
- schedule() stores a one-shot notification and returns an opaque handle,
- cancel() drops it,
- pop_due() hands out notifications whose fire time has come.

run_notifier() is a small polling loop that delivers due notifications
through an injected messenger port and re-queues them on failure.

How a reminder is shown (console line, sound, badge) belongs to the
messenger and the NotificationBehavior, not to the task registry.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from ..core.ports import OutboundMessenger
from .task_models import CalendarTrigger, FirePolicy, NotificationContent

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class NotificationBehavior:
    """
    How delivered notifications are presented.

    - show_alert: forward to the messenger at all (otherwise dropped after logging)
    - play_sound: honor content.sound
    - set_badge: count delivered notifications on the notifier
    """

    show_alert: bool = True
    play_sound: bool = True
    set_badge: bool = True


@dataclass(slots=True, frozen=True)
class PendingNotification:
    handle: str
    content: NotificationContent
    trigger: FirePolicy
    fire_at: datetime
    attempts: int = 0


class LocalNotifier:
    """
    In-memory one-shot notification service (local wall-clock time).

    pop_due() moves notifications into an in-flight set until deliver_due()
    settles or requeues them. cancel() of an in-flight handle is remembered,
    so a failed delivery is never requeued for a cancelled reminder.
    """

    def __init__(self, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._pending: dict[str, PendingNotification] = {}
        self._in_flight: set[str] = set()
        self._cancelled: set[str] = set()
        self.badge_count = 0

    def now(self) -> datetime:
        return self._clock()

    async def schedule(self, content: NotificationContent, trigger: FirePolicy) -> str:
        if isinstance(trigger, CalendarTrigger):
            fire_at = trigger.to_datetime()
        else:
            fire_at = self._clock()

        handle = uuid.uuid4().hex
        self._pending[handle] = PendingNotification(
            handle=handle,
            content=content,
            trigger=trigger,
            fire_at=fire_at,
        )
        logger.info("Notification scheduled handle=%s fire_at=%s", handle, fire_at)
        return handle

    async def cancel(self, handle: str) -> None:
        if self._pending.pop(handle, None) is not None:
            logger.info("Notification cancelled handle=%s", handle)
            return
        if handle in self._in_flight:
            self._cancelled.add(handle)
            logger.info("Notification cancelled while in flight handle=%s", handle)
            return
        logger.debug("Cancel for unknown handle=%s ignored", handle)

    def is_cancelled(self, handle: str) -> bool:
        return handle in self._cancelled

    def pending(self) -> list[PendingNotification]:
        return sorted(self._pending.values(), key=lambda n: n.fire_at)

    def pop_due(self, now: datetime | None = None) -> list[PendingNotification]:
        """Remove and return notifications with fire_at <= now, oldest first."""
        current = now if now is not None else self._clock()
        due = [n for n in self.pending() if n.fire_at <= current]
        for n in due:
            del self._pending[n.handle]
            self._in_flight.add(n.handle)
        return due

    def settle(self, handle: str) -> None:
        """Forget an in-flight handle (delivered, suppressed or cancelled)."""
        self._in_flight.discard(handle)
        self._cancelled.discard(handle)

    def requeue(self, notification: PendingNotification, fire_at: datetime) -> None:
        if notification.handle in self._cancelled:
            logger.info("Cancelled notification handle=%s not requeued", notification.handle)
            self.settle(notification.handle)
            return

        self._in_flight.discard(notification.handle)
        self._pending[notification.handle] = replace(
            notification, fire_at=fire_at, attempts=notification.attempts + 1
        )


async def deliver_due(
        notifier: LocalNotifier,
        messenger: OutboundMessenger,
        *,
        behavior: NotificationBehavior = NotificationBehavior(),
        retry_delay_seconds: float = 30.0,
        now: datetime | None = None,
) -> int:
    """
    Deliver every due notification once. Returns the number delivered.

    On messenger failure the notification is put back with fire_at pushed
    forward by retry_delay_seconds, unless it was cancelled meanwhile.
    """
    current = now if now is not None else notifier.now()
    delivered = 0

    for n in notifier.pop_due(current):
        # An earlier send in this batch may have yielded to a delete().
        if notifier.is_cancelled(n.handle):
            notifier.settle(n.handle)
            continue

        if not behavior.show_alert:
            logger.info("Notification handle=%s suppressed (alerts disabled)", n.handle)
            notifier.settle(n.handle)
            continue

        try:
            await messenger.send_text(
                text=n.content.body,
                title=n.content.title,
                sound=n.content.sound and behavior.play_sound,
            )
        except Exception:
            logger.exception("Notification delivery failed handle=%s attempt=%s", n.handle, n.attempts + 1)
            notifier.requeue(n, current + timedelta(seconds=retry_delay_seconds))
            continue

        notifier.settle(n.handle)
        delivered += 1
        if behavior.set_badge:
            notifier.badge_count += 1
        logger.info("Notification delivered handle=%s task_id=%s", n.handle, n.content.data.get("task_id"))

    return delivered


async def run_notifier(
        notifier: LocalNotifier,
        messenger: OutboundMessenger,
        *,
        behavior: NotificationBehavior = NotificationBehavior(),
        interval_seconds: float = 1.0,
        retry_delay_seconds: float = 30.0,
) -> None:
    """
    Simple polling loop: every interval_seconds deliver due notifications.

    To stop the notifier, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    retry_s = max(0.01, float(retry_delay_seconds))

    while True:
        try:
            await deliver_due(
                notifier,
                messenger,
                behavior=behavior,
                retry_delay_seconds=retry_s,
            )
        except Exception:
            logger.exception("deliver_due failed")

        await asyncio.sleep(sleep_s)
