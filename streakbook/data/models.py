"""
Streakbook — Data Models.

Habits and users persist in SQLite. A habit's month-by-month completion
state is not modelled here: it lives in a per-month bitmap row and is only
ever turned into Day records by the history engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import IntEnum

from streakbook.core.schedule import TrackedWeekDays


class HabitStatus(IntEnum):
    ACTIVE = 0
    ENDED = 1


@dataclass
class User:
    """A registered user. Owns habits."""

    id: str
    display_name: str
    created_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "created_at": self.created_at,
        }


@dataclass
class HabitLifecycle:
    """The part of a habit the history engine reads."""

    tracked_week_days: TrackedWeekDays
    start_date: date
    end_date: date | None
    status: HabitStatus


@dataclass
class Habit:
    """A recurring habit tracked on some weekdays.

    Created ACTIVE with no end date; ends exactly once.
    """

    id: str
    user_id: str
    title: str
    description: str
    tracked_week_days: TrackedWeekDays
    start_date: date                  # creation day (UTC)
    end_date: date | None = None      # set when the habit ends
    status: HabitStatus = HabitStatus.ACTIVE

    @property
    def lifecycle(self) -> HabitLifecycle:
        return HabitLifecycle(
            tracked_week_days=self.tracked_week_days,
            start_date=self.start_date,
            end_date=self.end_date,
            status=self.status,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": int(self.status),
            "title": self.title,
            "description": self.description,
            "week_days": [int(d) for d in self.tracked_week_days.week_days()],
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }
