# src/todo_reminders/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime

from ..cli.commands import add_from_text
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def console_alert(title: str, messages: list[str]) -> None:
    """Alert callback for the task registry (validation / reminder problems)."""
    _print_ts(f"[{title}] " + "; ".join(messages))


class ConsoleMessenger:
    """OutboundMessenger that prints delivered reminders to stdout."""

    async def send_text(
        self,
        *,
        text: str,
        title: str | None = None,
        sound: bool = False,
    ) -> None:
        bell = "\a" if sound else ""
        head = f"{title}: " if title else ""
        print(f"{bell}\n[{_ts_local()}] [REMINDER] {head}{text}", flush=True)


def start_stdin_reader(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[str | None]) -> threading.Thread:
    """
    Read stdin in a daemon thread and feed lines into the loop.

    None is pushed on EOF. A daemon thread never blocks interpreter exit,
    unlike input() running in the default executor.
    """

    def _reader() -> None:
        while True:
            try:
                line = input()
            except EOFError:
                loop.call_soon_threadsafe(queue.put_nowait, None)
                return
            loop.call_soon_threadsafe(queue.put_nowait, line)

    t = threading.Thread(target=_reader, name="console-stdin", daemon=True)
    t.start()
    return t


async def run_console_loop(state: AppState, lines: asyncio.Queue[str | None] | None = None) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    if lines is None:
        lines = asyncio.Queue()
        start_stdin_reader(asyncio.get_running_loop(), lines)

    while True:
        print(">>> ", end="", flush=True)
        raw = await lines.get()
        if raw is None:
            logger.info("Console EOF received, exiting.")
            break

        user_input = raw.strip()
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = await command_registry.handle(state, user_input, emit=_print_ts)
            if response is None:
                # Plain text: same as /add (a leading HH:MM still sets a reminder).
                response = await add_from_text(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        _print_ts(response)

    logger.info("Console connector finished.")
