"""
taskminder: tasks with locally scheduled reminder notifications.

Components:
- tasks/: task models, SQLite store, reminder coordinator, service surface
- notifications/: APScheduler-backed local notification scheduler + observers
- cli/ and connectors/: console presentation layer
"""
