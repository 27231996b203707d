"""
Progress persistence.

The pipeline never talks to storage; callers load a ProgressRecord, apply
activities and save the result. Stores provide:
- load/save keyed by (user_id, roadmap_id)
- reset (explicit user data wipe)
- lock(user_id, roadmap_id): single writer per key

SQLiteProgressStore database location: ~/.skillnet/progress.db
"""

from __future__ import annotations

import json
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Protocol

from loguru import logger

from src.core.errors import StateInvariantViolation
from src.core.models import ActivityRecord, ProgressRecord, validate_record
from src.gamification.progress import new_record


class ProgressStore(Protocol):
    """Key-value persistence for progress records."""

    def load(self, user_id: str, roadmap_id: str) -> ProgressRecord:
        """Stored record, or a new empty record when none exists."""
        ...

    def save(self, record: ProgressRecord) -> None:
        ...

    def reset(self, user_id: str, roadmap_id: str) -> ProgressRecord:
        """Wipe a record back to empty and return it."""
        ...

    def lock(self, user_id: str, roadmap_id: str):
        """Context manager serializing updates for one key."""
        ...

    def log_activity(self, user_id: str, activity: ActivityRecord) -> int:
        """Append an applied activity to the history log."""
        ...


class _KeyLocks:
    """One re-entrant lock per (user, roadmap) key."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, str], threading.RLock] = {}

    @contextmanager
    def hold(self, key: tuple[str, str]) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.RLock())
        with lock:
            yield


@dataclass
class ActivityLogEntry:
    """A single applied activity."""

    id: int
    user_id: str
    roadmap_id: str
    kind: str
    activity_date: date
    xp_earned: int
    tooltip: str
    recorded_at: datetime


# =============================================================================
# In-memory store
# =============================================================================


class InMemoryProgressStore:
    """Dictionary-backed store for tests and embedding."""

    def __init__(self):
        self._records: dict[tuple[str, str], ProgressRecord] = {}
        self._log: list[ActivityLogEntry] = []
        self._next_id = 1
        self._locks = _KeyLocks()

    def load(self, user_id: str, roadmap_id: str) -> ProgressRecord:
        record = self._records.get((user_id, roadmap_id))
        return record if record is not None else new_record(user_id, roadmap_id)

    def save(self, record: ProgressRecord) -> None:
        self._records[record.key] = validate_record(record)

    def reset(self, user_id: str, roadmap_id: str) -> ProgressRecord:
        record = new_record(user_id, roadmap_id)
        self._records[record.key] = record
        self._log = [e for e in self._log if (e.user_id, e.roadmap_id) != record.key]
        return record

    def lock(self, user_id: str, roadmap_id: str):
        return self._locks.hold((user_id, roadmap_id))

    def keys(self) -> list[tuple[str, str]]:
        return sorted(self._records)

    def log_activity(self, user_id: str, activity: ActivityRecord) -> int:
        entry_id = self._next_id
        self._next_id += 1
        self._log.append(ActivityLogEntry(
            id=entry_id,
            user_id=user_id,
            roadmap_id=activity.roadmap_id,
            kind=activity.kind.value,
            activity_date=activity.date,
            xp_earned=activity.xp_earned,
            tooltip=activity.tooltip,
            recorded_at=datetime.now(),
        ))
        return entry_id

    def history(self, user_id: str, roadmap_id: str, limit: int = 20) -> list[ActivityLogEntry]:
        """Most recent activities for a key, newest first."""
        matching = [e for e in reversed(self._log) if e.user_id == user_id and e.roadmap_id == roadmap_id]
        return matching[:limit]


# =============================================================================
# SQLite store
# =============================================================================


class SQLiteProgressStore:
    """
    SQLite-backed progress persistence.

    Handles:
    - One JSON payload per (user_id, roadmap_id)
    - Activity log for history views
    """

    DEFAULT_DB_PATH = Path.home() / ".skillnet" / "progress.db"

    def __init__(self, db_path: Path | str | None = None):
        """
        Initialize the store.

        Args:
            db_path: Custom database path (defaults to ~/.skillnet/progress.db)
        """
        self.db_path = Path(db_path).expanduser() if db_path else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self._locks = _KeyLocks()
        self._write_lock = threading.Lock()
        self._init_schema()

        logger.debug(f"SQLiteProgressStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        """Initialize database schema."""
        cursor = self.conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS progress (
                user_id TEXT NOT NULL,
                roadmap_id TEXT NOT NULL,
                payload TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (user_id, roadmap_id)
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS activity_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                roadmap_id TEXT NOT NULL,
                kind TEXT NOT NULL,
                activity_date TEXT NOT NULL,
                xp_earned INTEGER DEFAULT 0,
                tooltip TEXT DEFAULT '',
                recorded_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_activity_log_key
            ON activity_log(user_id, roadmap_id)
        """)

        self.conn.commit()

    # =========================================================================
    # Progress records
    # =========================================================================

    def load(self, user_id: str, roadmap_id: str) -> ProgressRecord:
        """
        Load progress for a key.

        Returns:
            Stored record (new empty record if not found)

        Raises:
            StateInvariantViolation: If the stored payload is unreadable
        """
        cursor = self.conn.cursor()
        cursor.execute(
            "SELECT payload FROM progress WHERE user_id = ? AND roadmap_id = ?",
            (user_id, roadmap_id),
        )
        row = cursor.fetchone()
        if row is None:
            return new_record(user_id, roadmap_id)

        try:
            record = ProgressRecord.from_dict(json.loads(row["payload"]))
        except (ValueError, KeyError, TypeError) as e:
            raise StateInvariantViolation(
                f"Unreadable progress payload for {user_id}/{roadmap_id}", [str(e)]
            ) from e
        return validate_record(record)

    def save(self, record: ProgressRecord) -> None:
        """Insert or replace the record for its key."""
        validate_record(record)
        payload = json.dumps(record.to_dict())
        with self._write_lock:
            self.conn.execute(
                """
                INSERT INTO progress (user_id, roadmap_id, payload, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id, roadmap_id) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
            """,
                (record.user_id, record.roadmap_id, payload, datetime.now().isoformat()),
            )
            self.conn.commit()

    def reset(self, user_id: str, roadmap_id: str) -> ProgressRecord:
        """
        Wipe a record and its activity log.

        Returns:
            The new empty record
        """
        record = new_record(user_id, roadmap_id)
        with self._write_lock:
            cursor = self.conn.cursor()
            cursor.execute(
                "DELETE FROM activity_log WHERE user_id = ? AND roadmap_id = ?",
                (user_id, roadmap_id),
            )
            logger.info(f"Reset {user_id}/{roadmap_id}: cleared {cursor.rowcount} activity log rows")
            self.conn.commit()
        self.save(record)
        return record

    def lock(self, user_id: str, roadmap_id: str):
        return self._locks.hold((user_id, roadmap_id))

    def keys(self) -> list[tuple[str, str]]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT user_id, roadmap_id FROM progress ORDER BY user_id, roadmap_id")
        return [(row["user_id"], row["roadmap_id"]) for row in cursor.fetchall()]

    # =========================================================================
    # Activity log
    # =========================================================================

    def log_activity(self, user_id: str, activity: ActivityRecord) -> int:
        """
        Append an applied activity to the log.

        Returns:
            Log row ID
        """
        with self._write_lock:
            cursor = self.conn.cursor()
            cursor.execute(
                """
                INSERT INTO activity_log (user_id, roadmap_id, kind, activity_date, xp_earned, tooltip)
                VALUES (?, ?, ?, ?, ?, ?)
            """,
                (
                    user_id,
                    activity.roadmap_id,
                    activity.kind.value,
                    activity.date.isoformat(),
                    activity.xp_earned,
                    activity.tooltip,
                ),
            )
            self.conn.commit()
            return cursor.lastrowid

    def history(self, user_id: str, roadmap_id: str, limit: int = 20) -> list[ActivityLogEntry]:
        """Most recent logged activities for a key, newest first."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT * FROM activity_log
            WHERE user_id = ? AND roadmap_id = ?
            ORDER BY id DESC
            LIMIT ?
        """,
            (user_id, roadmap_id, limit),
        )
        return [
            ActivityLogEntry(
                id=row["id"],
                user_id=row["user_id"],
                roadmap_id=row["roadmap_id"],
                kind=row["kind"],
                activity_date=date.fromisoformat(row["activity_date"]),
                xp_earned=row["xp_earned"],
                tooltip=row["tooltip"] or "",
                recorded_at=datetime.fromisoformat(str(row["recorded_at"])),
            )
            for row in cursor.fetchall()
        ]

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
