# tests/test_task_registry.py

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest

from todo_reminders.tasks.task_models import CalendarTrigger, Task
from todo_reminders.tasks.task_store import (
    MSG_EMPTY_TEXT,
    MSG_MISSING_TIME,
    REMINDER_FAILED_TITLE,
    VALIDATION_TITLE,
    TaskRegistry,
)


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n\t "])
async def test_blank_text_is_rejected(registry, alerts, text) -> None:
    assert await registry.add(text) is False
    assert len(registry) == 0
    assert alerts == [(VALIDATION_TITLE, [MSG_EMPTY_TEXT])]


@pytest.mark.asyncio
async def test_require_time_collects_all_messages(scheduler, alerts) -> None:
    reg = TaskRegistry(scheduler, alert=lambda t, m: alerts.append((t, m)), require_time=True)

    assert await reg.add("  ") is False
    assert alerts == [(VALIDATION_TITLE, [MSG_EMPTY_TEXT, MSG_MISSING_TIME])]

    assert await reg.add("Buy milk") is False
    assert alerts[-1] == (VALIDATION_TITLE, [MSG_MISSING_TIME])
    assert reg.tasks == ()
    assert scheduler.scheduled == []


@pytest.mark.asyncio
async def test_add_appends_one_trimmed_open_task(registry) -> None:
    await registry.add("first")
    before = len(registry)

    assert await registry.add("  Buy milk  ") is True

    assert len(registry) == before + 1
    task = registry.tasks[-1]
    assert task.text == "Buy milk"
    assert task.completed is False
    assert task.scheduled_time is None
    assert task.reminder_handle is None


@pytest.mark.asyncio
async def test_toggle_flips_only_the_matching_task(registry) -> None:
    await registry.add("a")
    await registry.add("b")
    a, b = registry.tasks

    registry.toggle(b.id)
    assert [t.completed for t in registry.tasks] == [False, True]

    registry.toggle(b.id)
    assert [t.completed for t in registry.tasks] == [False, False]
    assert registry.get(a.id) == a


@pytest.mark.asyncio
async def test_toggle_absent_id_keeps_the_same_snapshot(registry) -> None:
    await registry.add("a")
    snapshot = registry.tasks
    seen: list[tuple[Task, ...]] = []
    registry.subscribe(seen.append)

    registry.toggle("missing")

    assert registry.tasks is snapshot
    assert seen == []


@pytest.mark.asyncio
async def test_delete_absent_id_is_a_noop(registry, scheduler) -> None:
    await registry.add("a")
    snapshot = registry.tasks

    await registry.delete("missing")

    assert registry.tasks is snapshot
    assert scheduler.cancelled == []


@pytest.mark.asyncio
async def test_buy_milk_scenario(registry, scheduler) -> None:
    assert await registry.add("Buy milk") is True
    (task,) = registry.tasks
    assert (task.text, task.completed, task.scheduled_time) == ("Buy milk", False, None)

    registry.toggle(task.id)
    assert registry.get(task.id).completed is True

    await registry.delete(task.id)
    assert registry.tasks == ()
    assert scheduler.scheduled == []
    assert scheduler.cancelled == []


@pytest.mark.asyncio
async def test_call_mom_scenario_handle_is_set_before_publish(registry, scheduler) -> None:
    when = (datetime.now() + timedelta(days=1)).replace(second=0, microsecond=0)

    visible_during_schedule: list[int] = []
    scheduler.on_schedule = lambda content, trigger: visible_during_schedule.append(len(registry))

    snapshots: list[tuple[Task, ...]] = []
    registry.subscribe(snapshots.append)

    assert await registry.add("Call mom", when) is True

    assert visible_during_schedule == [0]
    assert len(scheduler.scheduled) == 1
    call = scheduler.scheduled[0]
    assert call.trigger == CalendarTrigger(
        year=when.year, month=when.month, day=when.day, hour=when.hour, minute=when.minute
    )
    assert call.content.body == "Call mom"

    (task,) = registry.tasks
    assert task.reminder_handle == "h1"
    assert call.content.data == {"task_id": task.id}
    # Every published snapshot already carried the handle.
    assert all(t.reminder_handle == "h1" for snap in snapshots for t in snap)


@pytest.mark.asyncio
async def test_delete_cancels_reminder_exactly_once(registry, scheduler) -> None:
    await registry.add("Call mom", datetime.now() + timedelta(hours=2))
    await registry.add("Buy milk")
    reminded, plain = registry.tasks

    await registry.delete(reminded.id)

    assert scheduler.cancelled == [reminded.reminder_handle]
    assert registry.tasks == (plain,)


@pytest.mark.asyncio
async def test_schedule_failure_adds_task_without_reminder(registry, scheduler, alerts) -> None:
    scheduler.fail_schedule = RuntimeError("permission denied")

    assert await registry.add("Call mom", datetime.now() + timedelta(hours=1)) is True

    (task,) = registry.tasks
    assert task.reminder_handle is None
    assert task.scheduled_time is not None
    assert alerts[-1][0] == REMINDER_FAILED_TITLE
    assert "permission denied" in alerts[-1][1]


@pytest.mark.asyncio
async def test_schedule_failure_can_block_creation(scheduler, alerts) -> None:
    reg = TaskRegistry(
        scheduler,
        alert=lambda t, m: alerts.append((t, m)),
        block_on_reminder_failure=True,
    )
    scheduler.fail_schedule = RuntimeError("boom")

    assert await reg.add("Call mom", datetime.now() + timedelta(hours=1)) is False
    assert reg.tasks == ()
    assert alerts[-1][0] == REMINDER_FAILED_TITLE


@pytest.mark.asyncio
async def test_cancel_failure_still_removes_task(registry, scheduler) -> None:
    await registry.add("Call mom", datetime.now() + timedelta(hours=1))
    (task,) = registry.tasks
    scheduler.fail_cancel = RuntimeError("gone")

    await registry.delete(task.id)

    assert scheduler.cancelled == [task.reminder_handle]
    assert registry.tasks == ()


@pytest.mark.asyncio
async def test_delete_keeps_tasks_added_while_cancel_is_pending(registry, scheduler) -> None:
    await registry.add("Call mom", datetime.now() + timedelta(hours=1))
    (task,) = registry.tasks

    scheduler.cancel_gate = asyncio.Event()
    deleting = asyncio.create_task(registry.delete(task.id))
    await asyncio.sleep(0)

    assert registry.get(task.id) is not None
    await registry.add("Buy milk")

    scheduler.cancel_gate.set()
    await deleting

    assert [t.text for t in registry.tasks] == ["Buy milk"]


@pytest.mark.asyncio
async def test_ids_are_unique_within_the_same_millisecond(scheduler) -> None:
    reg = TaskRegistry(scheduler, clock=lambda: 1_700_000_000.0)

    for text in ("a", "b", "c"):
        await reg.add(text)

    ids = [t.id for t in reg.tasks]
    assert ids == ["1700000000000", "1700000000001", "1700000000002"]


@pytest.mark.asyncio
async def test_listener_errors_do_not_block_other_listeners(registry) -> None:
    seen: list[int] = []

    def broken(_tasks) -> None:
        raise ValueError("listener bug")

    registry.subscribe(broken)
    unsubscribe = registry.subscribe(lambda tasks: seen.append(len(tasks)))

    await registry.add("a")
    unsubscribe()
    await registry.add("b")

    assert seen == [1]
    assert len(registry) == 2
