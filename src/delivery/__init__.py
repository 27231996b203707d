"""
Delivery layer: persistence and the caller-side progress service.

Components:
- ProgressStore: persistence protocol (load/save/reset/lock per key)
- InMemoryProgressStore: dictionary-backed store
- SQLiteProgressStore: SQLite persistence with an activity log
- ProgressService: lock -> load -> apply -> save driver
"""

from .progress_service import ProgressService, ProgressSummary
from .progress_store import ActivityLogEntry, InMemoryProgressStore, ProgressStore, SQLiteProgressStore

__all__ = [
    # Persistence
    "ProgressStore",
    "InMemoryProgressStore",
    "SQLiteProgressStore",
    "ActivityLogEntry",
    # Service
    "ProgressService",
    "ProgressSummary",
]
