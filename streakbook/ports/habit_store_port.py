"""Habit store port — abstract interface for habit persistence.

Core modules depend on this protocol, never on a specific database.
Every method scoped by ``user_id`` treats a habit owned by someone else
exactly like a missing one.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from streakbook.data.models import Habit, HabitLifecycle


class StoreError(Exception):
    """Raised when any storage operation fails. Never shown to clients."""


class HabitStorePort(Protocol):
    """Abstract habit storage used by the service layer."""

    def add_habit(self, habit: Habit) -> Habit: ...

    def get_habit(self, habit_id: str, user_id: str) -> Habit | None: ...

    def list_habits(self, user_id: str) -> list[Habit]: ...

    def update_title(self, habit_id: str, title: str, user_id: str) -> bool: ...

    def update_description(
        self, habit_id: str, description: str, user_id: str
    ) -> bool: ...

    def end_habit(self, habit_id: str, end_date: date, user_id: str) -> bool: ...

    def delete_habit(self, habit_id: str, user_id: str) -> bool: ...

    def load_habit_lifecycle(
        self, habit_id: str, user_id: str
    ) -> HabitLifecycle | None: ...

    def load_month_bitmap(
        self, habit_id: str, month_anchor: date
    ) -> tuple[int, bool]: ...

    def upsert_month_bitmap(
        self, habit_id: str, month_anchor: date, xor_value: int, user_id: str
    ) -> bool: ...

    def set_month_bit(
        self, habit_id: str, month_anchor: date, bit: int, done: bool, user_id: str
    ) -> bool: ...
