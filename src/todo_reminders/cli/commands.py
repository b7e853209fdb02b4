# src/todo_reminders/cli/commands.py

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler4 = Callable[[AppState, list[str], CommandEmitter | None, str], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3 | CommandHandler4

logger = logging.getLogger(__name__)

_TIME_PREFIX_RE = re.compile(r"^(?:(\d{4}-\d{2}-\d{2})\s+)?([01]?\d|2[0-3]):([0-5]\d)(?:\s+|$)")


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Handlers may be plain functions or coroutines.
        Four-parameter handlers also get the raw text after the command name.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""
        args = rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        arity = len(inspect.signature(handler).parameters)
        if arity >= 4:
            result = cast(CommandHandler4, handler)(state, args, emit, rest)
        elif arity == 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def parse_time_text(text: str, now: datetime | None = None) -> tuple[datetime | None, str]:
    """
    Split an optional leading time off the task text.

    Accepted forms:
      HH:MM            -> today at that time (local)
      YYYY-MM-DD HH:MM -> that date and time (local)

    The remaining text is returned as typed, inner whitespace included.
    Raises ValueError for a date that does not exist (e.g. 2026-02-30).
    """
    m = _TIME_PREFIX_RE.match(text)
    if not m:
        return None, text

    day, hour, minute = m.group(1), int(m.group(2)), int(m.group(3))
    if day is not None:
        d = date.fromisoformat(day)
        when = datetime(d.year, d.month, d.day, hour, minute)
    else:
        base = now if now is not None else datetime.now()
        when = base.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return when, text[m.end():]


def format_task(task: Task, position: int | None = None) -> str:
    mark = "x" if task.completed else " "
    prefix = f"{position}. " if position is not None else ""
    when = f" ({task.scheduled_time.strftime('%H:%M')})" if task.scheduled_time else ""
    bell = " [reminder]" if task.reminder_handle else ""
    return f"{prefix}[{mark}] {task.text}{when}{bell} #{task.id}"


def resolve_task_id(state: AppState, token: str) -> str | None:
    """Accept either a task id or a 1-based position in the current list."""
    token = token.lstrip("#")
    if state.registry.get(token) is not None:
        return token

    tasks = state.registry.tasks
    if token.isdigit():
        pos = int(token)
        if 1 <= pos <= len(tasks):
            return tasks[pos - 1].id
    return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    tasks = state.registry.tasks
    done = sum(1 for t in tasks if t.completed)
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({done} done)\n"
        f"  Pending reminders: {len(state.notifier.pending())}\n"
        f"  Delivered reminders: {state.notifier.badge_count}\n"
        f"  Time required: {'yes' if getattr(s, 'require_time', False) else 'no'}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.registry.tasks
    if not tasks:
        return "No tasks yet."
    return "\n".join(format_task(t, i) for i, t in enumerate(tasks, start=1))


async def add_from_text(state: AppState, text: str) -> str:
    """Add a task from free text with an optional leading time."""
    try:
        scheduled_time, body = parse_time_text(text.strip())
    except ValueError:
        logger.debug("Rejected task text with invalid date text=%r", text)
        return "Invalid date. Use YYYY-MM-DD HH:MM."

    ok = await state.registry.add(body, scheduled_time)
    if not ok:
        return "Task not added."

    task = state.registry.tasks[-1]
    return f"Added: {format_task(task, len(state.registry.tasks))}"


async def cmd_add(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
    text: str = "",
) -> str:
    """
    /add text             -> task without a reminder
    /add 18:30 text       -> reminder today at 18:30
    /add 2026-10-20 09:00 text
    """
    return await add_from_text(state, text)


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id|position>"

    task_id = resolve_task_id(state, args[0])
    if task_id is None:
        return f"No such task: {args[0]}"

    state.registry.toggle(task_id)
    task = state.registry.get(task_id)
    return format_task(task) if task is not None else f"No such task: {args[0]}"


async def cmd_del(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <id|position>"

    task_id = resolve_task_id(state, args[0])
    if task_id is None:
        return f"No such task: {args[0]}"

    await state.registry.delete(task_id)
    return f"Deleted #{task_id}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task and reminder counters.")
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add [HH:MM | YYYY-MM-DD HH:MM] <text>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id|position>.", aliases=["toggle"])
registry.register("del", cmd_del, help_text="Delete a task: /del <id|position>.", aliases=["rm"])
