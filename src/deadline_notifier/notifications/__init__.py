"""
Notification subsystem.

Components:
- models.py: data structures (Notification, NotificationKind, NotificationQuery)
- store.py: SQLite-backed notification store (engine + feed API)
- classifier.py: pure upcoming/overdue threshold classification
- dedup.py: per-kind suppression windows (DedupGate)
- engine.py: one scan-classify-gate-dispatch cycle (NotificationEngine)
- scheduler.py: fixed-period trigger around the engine
- mailer.py / templates.py: SMTP email channel and HTML bodies
- feed.py: read/acknowledge helpers for the in-app feed
"""
