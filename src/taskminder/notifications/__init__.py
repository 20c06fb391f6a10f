"""
Local notifications.

- scheduler.py: APScheduler-backed LocalNotificationScheduler + NotificationConfig
- events.py: observer registry for delivered / pressed notifications
"""
