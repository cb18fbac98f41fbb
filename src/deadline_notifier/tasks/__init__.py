"""
Task subsystem (read side used by the notification engine).

Components:
- task_models.py: data structures (Task, TaskStatus, Assignee, TaskQuery)
- task_store.py: SQLite-backed storage + due-date queries
- task_api.py: small high-level helpers used by the rest of the app
"""
