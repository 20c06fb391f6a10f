"""
Task subsystem.

Components:
- task_models.py: data structures (Task, NewTask, TaskStatus, TaskPriority)
- task_store.py: SQLite-backed storage
- reminders.py: keeps reminder_time and scheduled notifications in sync
- task_api.py: TaskService, the operation surface used by the presentation layer
- task_tools.py: JSON function-calling wrapper over TaskService
"""
