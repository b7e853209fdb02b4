# src/todo_reminders/logging_setup.py

"""
Logging for the interactive console app.

stderr shares the terminal with the REPL prompt and reminder lines, so it only
gets app records above a per-logger threshold. The log file gets everything.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

APP_LOGGER = "todo_reminders"
LOG_FILE_NAME = "todo.log"

# The notifier polls every second; its INFO lines belong in the file only.
DEFAULT_QUIET_LOGGERS: Mapping[str, int] = {
    f"{APP_LOGGER}.tasks.task_scheduler": logging.WARNING,
}

_FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s %(name)s [%(threadName)s]: %(message)s"
_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(name: str | int | None, default: int = logging.INFO) -> int:
    """Map "debug", "WARNING", "10" or 10 to a logging level; unknown names give default."""
    if isinstance(name, int):
        return name
    if name is None:
        return default

    text = str(name).strip().upper()
    if text.isdigit():
        return int(text)
    return logging.getLevelNamesMapping().get(text, default)


class _ConsoleNoiseFilter(logging.Filter):
    """
    App records pass unless a quiet prefix raises their threshold (longest
    prefix wins). Third-party records and captured warnings need ERROR+.
    """

    def __init__(self, quiet: Mapping[str, int]) -> None:
        super().__init__()
        self._quiet = sorted(quiet.items(), key=lambda kv: len(kv[0]), reverse=True)

    def _threshold(self, name: str) -> int:
        if name != APP_LOGGER and not name.startswith(APP_LOGGER + "."):
            return logging.ERROR
        for prefix, level in self._quiet:
            if name == prefix or name.startswith(prefix + "."):
                return level
        return logging.NOTSET

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self._threshold(record.name)


def _build_handlers(
    log_file: Path,
    *,
    console_level: int,
    file_level: int,
    quiet: Mapping[str, int],
) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    console.addFilter(_ConsoleNoiseFilter(quiet))

    file = logging.FileHandler(log_file, encoding="utf-8")
    file.setLevel(file_level)
    file.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    return [console, file]


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
    quiet: Mapping[str, int] | None = None,
) -> Path:
    """
    Replace the root handlers with a filtered stderr handler and a file
    handler under log_dir. Call once at startup. Returns the log file path.
    """
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / LOG_FILE_NAME

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)

    root.setLevel(logging.DEBUG)
    for handler in _build_handlers(
        log_file,
        console_level=resolve_level(console_level),
        file_level=resolve_level(file_level, logging.DEBUG),
        quiet=DEFAULT_QUIET_LOGGERS if quiet is None else quiet,
    ):
        root.addHandler(handler)

    logging.captureWarnings(True)
    return log_file
