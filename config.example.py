# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKMINDER_APP_NAME": "App display name (default: taskminder).",
    "TASKMINDER_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "TASKMINDER_DATA_DIR": "Local data directory, also holds taskminder.log (default: .local/taskminder).",
    "TASKMINDER_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    # Notifications
    "TASKMINDER_NOTIFICATIONS_ENABLED": "Notification permission; false rejects reminders (default: true).",
    "TASKMINDER_NOTIFICATION_CHANNEL_ID": "Channel id attached to notifications (default: default).",
    "TASKMINDER_NOTIFICATION_CHANNEL_NAME": "Channel display name (default: Default Channel).",
    "TASKMINDER_NOTIFICATION_SOUND": "Notification sound name (default: default).",
    "TASKMINDER_MISFIRE_GRACE_SECONDS": "How late a reminder may still fire, e.g. after sleep (default: 60).",
    # Tasks
    "TASKMINDER_DEFAULT_CATEGORY": "Category used when none is given (default: Personal).",
    # Console
    "TASKMINDER_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
}
