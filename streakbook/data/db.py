"""
Streakbook — Habit Database.

Habits, users and monthly completion bitmaps persist in SQLite.
A bitmap row is keyed by (habit, first day of month); bit (day - 1) set
means that day was marked done. A missing row means nothing was marked.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import date, datetime, timezone
from functools import wraps
from pathlib import Path
from typing import Callable, Iterator, TypeVar

from streakbook.core.schedule import TrackedWeekDays
from streakbook.data.models import Habit, HabitLifecycle, HabitStatus, User
from streakbook.ports.habit_store_port import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id            TEXT PRIMARY KEY,
    display_name  TEXT NOT NULL,
    created_at    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS habits (
    id                 TEXT    PRIMARY KEY,
    user_id            TEXT    NOT NULL REFERENCES users (id) ON DELETE CASCADE,
    status             INTEGER NOT NULL DEFAULT 0,
    title              TEXT    NOT NULL,
    description        TEXT    NOT NULL DEFAULT '',
    tracked_week_days  INTEGER NOT NULL,
    start_date         TEXT    NOT NULL,
    end_date           TEXT
);

CREATE INDEX IF NOT EXISTS habits_user_id_idx ON habits (user_id);

CREATE TABLE IF NOT EXISTS habit_histories (
    habit_id  TEXT    NOT NULL REFERENCES habits (id) ON DELETE CASCADE,
    month     TEXT    NOT NULL,
    days      INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (habit_id, month)
);
"""


def _wrap_errors(method: Callable[..., T]) -> Callable[..., T]:
    """Re-raise sqlite3 errors as StoreError, logging the cause."""

    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except sqlite3.Error as exc:
            logger.error("%s failed: %s", method.__qualname__, exc)
            raise StoreError(f"{method.__name__} failed") from exc

    return wrapper


class _SQLiteDB:
    """Shared connection handling. Every call opens its own connection."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from streakbook.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    @_wrap_errors
    def _init_db(self) -> None:
        """Create all tables if they don't exist."""
        with self._connect() as conn:
            conn.executescript(_SCHEMA)
        logger.debug("Schema initialized at %s", self._db_path)


class HabitDB(_SQLiteDB):
    """SQLite-backed storage for habits and their monthly bitmaps.

    Implements HabitStorePort.
    """

    @staticmethod
    def _row_to_habit(row: sqlite3.Row) -> Habit:
        return Habit(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            description=row["description"],
            tracked_week_days=TrackedWeekDays(row["tracked_week_days"]),
            start_date=date.fromisoformat(row["start_date"]),
            end_date=date.fromisoformat(row["end_date"]) if row["end_date"] else None,
            status=HabitStatus(row["status"]),
        )

    @_wrap_errors
    def add_habit(self, habit: Habit) -> Habit:
        """Insert a new habit."""
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO habits
                    (id, user_id, status, title, description,
                     tracked_week_days, start_date, end_date)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    habit.id, habit.user_id, int(habit.status),
                    habit.title, habit.description,
                    habit.tracked_week_days.mask,
                    habit.start_date.isoformat(),
                    habit.end_date.isoformat() if habit.end_date else None,
                ),
            )
        logger.info("Habit added: %s '%s' for user %s", habit.id, habit.title, habit.user_id)
        return habit

    @_wrap_errors
    def get_habit(self, habit_id: str, user_id: str) -> Habit | None:
        """Fetch a single habit owned by ``user_id``."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM habits WHERE id = ? AND user_id = ?",
                (habit_id, user_id),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_habit(row)

    @_wrap_errors
    def list_habits(self, user_id: str) -> list[Habit]:
        """Return all habits of a user, oldest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM habits WHERE user_id = ? ORDER BY start_date, rowid",
                (user_id,),
            ).fetchall()
        return [self._row_to_habit(r) for r in rows]

    @_wrap_errors
    def update_title(self, habit_id: str, title: str, user_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE habits SET title = ? WHERE id = ? AND user_id = ?",
                (title, habit_id, user_id),
            )
        return cursor.rowcount > 0

    @_wrap_errors
    def update_description(self, habit_id: str, description: str, user_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE habits SET description = ? WHERE id = ? AND user_id = ?",
                (description, habit_id, user_id),
            )
        return cursor.rowcount > 0

    @_wrap_errors
    def end_habit(self, habit_id: str, end_date: date, user_id: str) -> bool:
        """Mark an ACTIVE habit ENDED. Returns False if nothing changed."""
        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE habits SET status = ?, end_date = ?
                WHERE id = ? AND user_id = ? AND status = ?
                """,
                (
                    int(HabitStatus.ENDED), end_date.isoformat(),
                    habit_id, user_id, int(HabitStatus.ACTIVE),
                ),
            )
        ended = cursor.rowcount > 0
        if ended:
            logger.info("Habit %s ended on %s", habit_id, end_date)
        return ended

    @_wrap_errors
    def delete_habit(self, habit_id: str, user_id: str) -> bool:
        """Permanently delete a habit and its history."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM habits WHERE id = ? AND user_id = ?",
                (habit_id, user_id),
            )
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Habit %s deleted", habit_id)
        return deleted

    def load_habit_lifecycle(self, habit_id: str, user_id: str) -> HabitLifecycle | None:
        """Fetch only what the history engine needs."""
        habit = self.get_habit(habit_id, user_id)
        if habit is None:
            return None
        return habit.lifecycle

    @_wrap_errors
    def load_month_bitmap(self, habit_id: str, month_anchor: date) -> tuple[int, bool]:
        """Return (bitmap, found) for the month containing ``month_anchor``."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT days FROM habit_histories WHERE habit_id = ? AND month = ?",
                (habit_id, month_anchor.replace(day=1).isoformat()),
            ).fetchone()
        if row is None:
            return 0, False
        return row["days"], True

    @_wrap_errors
    def upsert_month_bitmap(
        self, habit_id: str, month_anchor: date, xor_value: int, user_id: str,
    ) -> bool:
        """XOR ``xor_value`` into the month's bitmap in one statement.

        Creates the row with ``xor_value`` if it is missing. SQLite has no
        XOR operator, so a ^ b is written as (a | b) - (a & b).
        Returns False, writing nothing, if the habit is not the user's.
        """
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO habit_histories (habit_id, month, days)
                SELECT ?, ?, ?
                WHERE EXISTS (SELECT 1 FROM habits WHERE id = ? AND user_id = ?)
                ON CONFLICT (habit_id, month) DO UPDATE
                SET days = (days | excluded.days) - (days & excluded.days)
                """,
                (
                    habit_id, month_anchor.replace(day=1).isoformat(), xor_value,
                    habit_id, user_id,
                ),
            )
        return cursor.rowcount > 0

    @_wrap_errors
    def set_month_bit(
        self, habit_id: str, month_anchor: date, bit: int, done: bool, user_id: str,
    ) -> bool:
        """Set or clear ``bit`` in the month's bitmap in one statement.

        A missing row is created holding ``bit`` when setting, 0 when clearing.
        """
        month = month_anchor.replace(day=1).isoformat()
        with self._connect() as conn:
            if done:
                cursor = conn.execute(
                    """
                    INSERT INTO habit_histories (habit_id, month, days)
                    SELECT ?, ?, ?
                    WHERE EXISTS (SELECT 1 FROM habits WHERE id = ? AND user_id = ?)
                    ON CONFLICT (habit_id, month) DO UPDATE
                    SET days = days | excluded.days
                    """,
                    (habit_id, month, bit, habit_id, user_id),
                )
            else:
                cursor = conn.execute(
                    """
                    INSERT INTO habit_histories (habit_id, month, days)
                    SELECT ?, ?, 0
                    WHERE EXISTS (SELECT 1 FROM habits WHERE id = ? AND user_id = ?)
                    ON CONFLICT (habit_id, month) DO UPDATE
                    SET days = days & ~?
                    """,
                    (habit_id, month, habit_id, user_id, bit),
                )
        return cursor.rowcount > 0


class UserDB(_SQLiteDB):
    """SQLite-backed storage for registered users."""

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            display_name=row["display_name"],
            created_at=row["created_at"],
        )

    @_wrap_errors
    def add_user(self, display_name: str) -> User:
        """Register a new user with a generated ID."""
        user = User(
            id=str(uuid.uuid4()),
            display_name=display_name,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO users (id, display_name, created_at) VALUES (?, ?, ?)",
                (user.id, user.display_name, user.created_at),
            )
        logger.info("User registered: %s '%s'", user.id, display_name)
        return user

    @_wrap_errors
    def get_user(self, user_id: str) -> User | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    @_wrap_errors
    def is_registered(self, user_id: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM users WHERE id = ?", (user_id,),
            ).fetchone()
        return row is not None
