"""
Deadline notification engine for a task/team manager.

Periodically scans open tasks, classifies them as upcoming or overdue, and
emits at most one notification per (task, assignee, kind) per dedup window to
the in-app feed and by email.
"""

__version__ = "0.1.0"
