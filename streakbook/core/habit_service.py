"""
Streakbook — Habit Service.

Stateless service layer that orchestrates the habit use cases:
validate input -> check the patch window -> call the store -> run the
history engine. The HTTP layer calls this service and serializes what it
returns.

"Today" comes from an injected clock so every use case is reproducible.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Callable, Iterable

from streakbook.core import dates, history, mutation
from streakbook.core.errors import HabitNotFoundError, OutOfWindowError
from streakbook.core.lifecycle import new_habit, validate_description, validate_title

if TYPE_CHECKING:
    from streakbook.data.models import Habit
    from streakbook.ports.habit_store_port import HabitStorePort

logger = logging.getLogger(__name__)


class HabitService:
    """Habit use cases on top of a HabitStorePort."""

    def __init__(
        self,
        store: HabitStorePort,
        clock: Callable[[], date] = dates.today_utc,
        patch_window_days: int = mutation.PATCH_WINDOW_DAYS,
        min_history_year: int = dates.MIN_YEAR,
    ) -> None:
        self._store = store
        self._clock = clock
        self._patch_window_days = patch_window_days
        self._min_history_year = min_history_year

    # ------------------------------------------------------------------
    # Habits
    # ------------------------------------------------------------------

    def create_habit(
        self, user_id: str, title: str, description: str, week_days: Iterable[int],
    ) -> Habit:
        habit = new_habit(user_id, title, description, week_days, self._clock())
        return self._store.add_habit(habit)

    def list_habits(self, user_id: str) -> list[Habit]:
        return self._store.list_habits(user_id)

    def get_habit(self, habit_id: str, user_id: str) -> Habit:
        habit = self._store.get_habit(habit_id, user_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        return habit

    def rename_habit(self, habit_id: str, title: str, user_id: str) -> None:
        validate_title(title)
        if not self._store.update_title(habit_id, title, user_id):
            raise HabitNotFoundError(habit_id)

    def describe_habit(self, habit_id: str, description: str, user_id: str) -> None:
        validate_description(description)
        if not self._store.update_description(habit_id, description, user_id):
            raise HabitNotFoundError(habit_id)

    def end_habit(self, habit_id: str, user_id: str) -> None:
        """End an active habit today. Ending an ended habit does nothing."""
        if self._store.end_habit(habit_id, self._clock(), user_id):
            return
        # Nothing updated: either already ended or not ours.
        self.get_habit(habit_id, user_id)
        logger.debug("Habit %s already ended", habit_id)

    def delete_habit(self, habit_id: str, user_id: str) -> None:
        if not self._store.delete_habit(habit_id, user_id):
            raise HabitNotFoundError(habit_id)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def get_month_history(
        self, habit_id: str, year: int, month: int, user_id: str,
    ) -> history.History:
        """Reconstruct one month of a habit's history.

        Raises:
            InvalidYearError, InvalidMonthError: bad target month.
            HabitNotFoundError: habit missing or not owned by ``user_id``.
        """
        today = self._clock()
        dates.validate_year(year, today, self._min_history_year)
        dates.validate_month(month)
        anchor = dates.month_anchor(year, month)

        lifecycle = self._store.load_habit_lifecycle(habit_id, user_id)
        if lifecycle is None:
            raise HabitNotFoundError(habit_id)

        if not history.window_intersects_month(
            anchor, lifecycle.start_date, lifecycle.end_date, today,
        ):
            return history.untracked_history(anchor)

        bitmap, _found = self._store.load_month_bitmap(habit_id, anchor)
        return history.reconstruct(
            anchor,
            bitmap,
            lifecycle.tracked_week_days,
            lifecycle.start_date,
            lifecycle.end_date,
            today,
        )

    def toggle_day(self, habit_id: str, target: date | str, user_id: str) -> None:
        """Flip the done state of one day in the patch window.

        Calling this twice for the same day restores the previous state.

        Raises:
            InvalidDateError: ``target`` is not a YYYY-MM-DD string.
            OutOfWindowError: ``target`` is in the future or too old.
            HabitNotFoundError: habit missing or not owned by ``user_id``.
        """
        day = self._checked_day(target)
        toggled = self._store.upsert_month_bitmap(
            habit_id, mutation.month_key(day), mutation.day_bit(day), user_id,
        )
        if not toggled:
            raise HabitNotFoundError(habit_id)
        logger.info("Habit %s history toggled for %s", habit_id, day)

    def set_day(self, habit_id: str, target: date | str, done: bool, user_id: str) -> None:
        """Mark one day in the patch window as done or not done.

        Unlike toggle_day, repeating the call leaves the same result.
        """
        day = self._checked_day(target)
        updated = self._store.set_month_bit(
            habit_id, mutation.month_key(day), mutation.day_bit(day), done, user_id,
        )
        if not updated:
            raise HabitNotFoundError(habit_id)
        logger.info("Habit %s history set to done=%s for %s", habit_id, done, day)

    def _checked_day(self, target: date | str) -> date:
        day = dates.parse_iso_date(target) if isinstance(target, str) else target
        try:
            mutation.check_patch_window(day, self._clock(), self._patch_window_days)
        except OutOfWindowError:
            logger.warning("Rejected history change for %s outside patch window", day)
            raise
        return day
