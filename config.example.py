# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO).",
    "TODO_DATA_DIR": "Local data directory for the log file (default: .local/todo).",
    # Validation
    "TODO_REQUIRE_TIME": "Reject tasks without a reminder time (true/false, default: false).",
    "TODO_BLOCK_ON_REMINDER_FAILURE": (
        "Do not add a task whose reminder could not be scheduled (true/false, default: false)."
    ),
    # Reminders
    "TODO_REMINDER_TITLE": "Notification title (default: Task reminder).",
    "TODO_NOTIFIER_INTERVAL_SECONDS": "How often due reminders are checked (default: 1.0).",
    "TODO_NOTIFIER_RETRY_SECONDS": "Redelivery delay after a failed delivery (default: 30.0).",
    # Notification handler policy
    "TODO_NOTIFY_ALERT": "Show delivered reminders (default: true).",
    "TODO_NOTIFY_SOUND": "Ring the terminal bell on delivery (default: true).",
    "TODO_NOTIFY_BADGE": "Count delivered reminders in /status (default: true).",
}
