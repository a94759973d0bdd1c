"""History reconstruction engine — pure business logic.

Turns a month's completion bitmap, the habit's weekday schedule and its
lifecycle window into one Day per calendar day of that month.

No I/O: "today" is always passed in by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import IntEnum
from typing import Callable, NamedTuple

from streakbook.core import dates
from streakbook.core.schedule import TrackedWeekDays


class DayStatus(IntEnum):
    UNTRACKED = 0
    DONE = 1
    MISSED = 2
    PENDING = 3


@dataclass(frozen=True)
class Day:
    """A single day record in a habit's history."""

    status: DayStatus
    date: date

    def to_dict(self) -> dict:
        return {"status": int(self.status), "date": self.date.isoformat()}


History = list[Day]


class _Context(NamedTuple):
    day: date
    done: bool
    tracked: bool
    start_date: date
    end_date: date | None
    today: date


# First match wins; lifecycle and schedule rules precede the done bit.
_RULES: tuple[tuple[Callable[[_Context], bool], DayStatus], ...] = (
    (lambda c: c.day < c.start_date, DayStatus.UNTRACKED),
    (lambda c: c.day > c.today, DayStatus.UNTRACKED),
    (lambda c: c.end_date is not None and c.day > c.end_date, DayStatus.UNTRACKED),
    (lambda c: not c.tracked, DayStatus.UNTRACKED),
    (lambda c: c.done, DayStatus.DONE),
    (lambda c: c.day == c.today, DayStatus.PENDING),
)


def classify(ctx: _Context) -> DayStatus:
    for predicate, status in _RULES:
        if predicate(ctx):
            return status
    return DayStatus.MISSED


def reconstruct(
    month_anchor: date,
    bitmap: int,
    schedule: TrackedWeekDays,
    start_date: date,
    end_date: date | None,
    today: date,
) -> History:
    """Build the month's history from its completion bitmap.

    Args:
        month_anchor: Any day of the requested month.
        bitmap: Bit (day-of-month - 1) set means that day was marked done.
        schedule: Weekdays the habit is tracked on.
        start_date: First day of the habit.
        end_date: Day the habit ended, or None while it is active.
        today: Current UTC day, supplied by the caller's clock.

    Returns:
        One Day per calendar day of the month, in ascending order.
    """
    first = dates.first_of_month(month_anchor)
    history: History = []
    for i in range(dates.days_in_month(month_anchor)):
        day = dates.add_days(first, i)
        ctx = _Context(
            day=day,
            done=bool((bitmap >> i) & 1),
            tracked=schedule.tracks(dates.weekday(day)),
            start_date=start_date,
            end_date=end_date,
            today=today,
        )
        history.append(Day(classify(ctx), day))
    return history


def untracked_history(month_anchor: date) -> History:
    """Every day of the month as UNTRACKED."""
    first = dates.first_of_month(month_anchor)
    return [
        Day(DayStatus.UNTRACKED, dates.add_days(first, i))
        for i in range(dates.days_in_month(month_anchor))
    ]


def window_intersects_month(
    month_anchor: date,
    start_date: date,
    end_date: date | None,
    today: date,
) -> bool:
    """Whether any day of the month lies inside the habit's active window.

    When this is False, reconstruct() returns all UNTRACKED regardless of
    bitmap or schedule, so untracked_history() gives the same result.
    """
    window_end = today if end_date is None else min(today, end_date)
    return (
        start_date <= dates.last_of_month(month_anchor)
        and window_end >= dates.first_of_month(month_anchor)
        and start_date <= window_end
    )
