# src/todo_reminders/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs on one event loop:
- the console REPL (presentation layer),
- the local notifier loop delivering due reminders to the console.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleMessenger, console_alert, run_console_loop
from ..core.state import AppState
from ..logging_setup import resolve_level, setup_logging
from ..tasks.task_scheduler import run_notifier

logger = logging.getLogger(__name__)


async def run_app(state: AppState) -> None:
    s = state.settings
    notifier_task = asyncio.create_task(
        run_notifier(
            state.notifier,
            ConsoleMessenger(),
            behavior=state.behavior,
            interval_seconds=float(getattr(s, "notifier_interval_seconds", 1.0)),
            retry_delay_seconds=float(getattr(s, "notifier_retry_seconds", 30.0)),
        ),
        name="notifier",
    )

    try:
        await run_console_loop(state)
    finally:
        notifier_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await notifier_task

        pending = len(state.notifier.pending())
        if pending:
            logger.info("Exiting with %d undelivered reminder(s); they are not persisted.", pending)


def main() -> None:
    settings = get_settings()

    # unknown names (typos, "BASIC_FORMAT") fall back to INFO
    console_level = resolve_level(getattr(settings, "log_level", "INFO"))

    setup_logging(log_dir=settings.data_dir, console_level=console_level)
    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings, alert=console_alert)

    try:
        asyncio.run(run_app(state))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, shutting down...")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
