"""Calendar helpers — UTC calendar days with no time of day.

A day is a plain ``datetime.date`` (immutable, comparable, hashable). The
helpers here only add what the history engine needs on top of it: month
boundaries, UTC normalization and request-boundary validation.

No I/O: the only clock read is ``today_utc``, which callers inject.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta, timezone

from streakbook.core.errors import InvalidDateError, InvalidMonthError, InvalidYearError

MIN_YEAR = 2024


def today_utc() -> date:
    """Return the current UTC calendar day."""
    return datetime.now(timezone.utc).date()


def from_datetime(dt: datetime) -> date:
    """Truncate a datetime to its UTC calendar day.

    Naive datetimes are taken to already be in UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.date()


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def days_in_month(d: date) -> int:
    return calendar.monthrange(d.year, d.month)[1]


def last_of_month(d: date) -> date:
    return d.replace(day=days_in_month(d))


def weekday(d: date) -> int:
    """Monday=0 … Sunday=6."""
    return d.weekday()


def month_anchor(year: int, month: int) -> date:
    """Return the first day of the given month."""
    return date(year, month, 1)


def parse_iso_date(raw: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    Raises InvalidDateError on anything else, including full timestamps
    and months or days written without zero padding.
    """
    if not isinstance(raw, str) or not re.fullmatch(r"\d{4}-\d{2}-\d{2}", raw):
        raise InvalidDateError(str(raw))
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidDateError(str(raw)) from None


def validate_year(year: int, today: date, min_year: int = MIN_YEAR) -> None:
    """Accept years from ``min_year`` up to next year relative to ``today``."""
    if year < min_year or year > today.year + 1:
        raise InvalidYearError()


def validate_month(month: int) -> None:
    if month < 1 or month > 12:
        raise InvalidMonthError()
