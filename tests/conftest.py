"""Shared test fixtures and configuration.

Sets fake environment variables before any streakbook imports so
streakbook.config loads predictable settings, and provides temp DBs, a
service with a fixed clock and an HTTP test client.
"""

import os

# Patch env vars BEFORE any streakbook imports
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("HISTORY_PATCH_WINDOW_DAYS", "7")
os.environ.setdefault("MIN_HISTORY_YEAR", "2024")

from datetime import date

import pytest

# Wednesday
TODAY = date(2024, 7, 31)


class FakeClock:
    """Callable clock returning a settable day."""

    def __init__(self, today: date = TODAY) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_streakbook.db")


@pytest.fixture
def habit_db(tmp_db_path):
    """Return a HabitDB instance backed by a temp file."""
    from streakbook.data.db import HabitDB
    return HabitDB(db_path=tmp_db_path)


@pytest.fixture
def user_db(tmp_db_path):
    """Return a UserDB instance sharing the habit DB's file."""
    from streakbook.data.db import UserDB
    return UserDB(db_path=tmp_db_path)


@pytest.fixture
def user(user_db):
    return user_db.add_user("Alice")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(habit_db, clock):
    from streakbook.core.habit_service import HabitService
    return HabitService(habit_db, clock=clock)


@pytest.fixture
def client(habit_db, user_db, clock):
    from fastapi.testclient import TestClient

    from streakbook.api.app import create_app
    return TestClient(create_app(habit_db=habit_db, user_db=user_db, clock=clock))
