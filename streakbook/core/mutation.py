"""History mutation rules.

A day is marked done by flipping its bit in the month's bitmap. Only days in
the trailing patch window (today and the previous N days) may be changed.
The storage adapter applies the bit to the stored row in one statement.
"""

from __future__ import annotations

from datetime import date

from streakbook.core import dates
from streakbook.core.errors import OutOfWindowError

PATCH_WINDOW_DAYS = 7


def check_patch_window(target: date, today: date, window_days: int = PATCH_WINDOW_DAYS) -> None:
    """Raise OutOfWindowError unless ``0 <= today - target <= window_days``."""
    diff = (today - target).days
    if diff < 0 or diff > window_days:
        raise OutOfWindowError(window_days)


def day_bit(d: date) -> int:
    """Bit for ``d`` inside its month's bitmap."""
    return 1 << (d.day - 1)


def month_key(d: date) -> date:
    """Key of the bitmap row that holds ``d``."""
    return dates.first_of_month(d)
