"""Habit lifecycle — creation and validation.

Validation messages are safe to return to the client as-is.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Iterable

from streakbook.core.errors import DescriptionError, TitleError
from streakbook.core.schedule import TrackedWeekDays
from streakbook.data.models import Habit, HabitStatus

TITLE_MIN_CHARS = 2
TITLE_MAX_CHARS = 64
DESCRIPTION_MAX_CHARS = 256


def _has_forbidden_chars(text: str) -> bool:
    """Control characters and any whitespace other than a plain space."""
    return any(
        not c.isprintable() or (c.isspace() and c != " ")
        for c in text
    )


def validate_title(title: str) -> None:
    if len(title) > TITLE_MAX_CHARS:
        raise TitleError("title is too long")
    if len(title) < TITLE_MIN_CHARS:
        raise TitleError("title is too short")
    if _has_forbidden_chars(title):
        raise TitleError("title is invalid")
    if len(title) - title.count(" ") < TITLE_MIN_CHARS:
        raise TitleError("title is too short")
    if title.startswith(" ") or title.endswith(" "):
        raise TitleError("title is invalid")


def validate_description(description: str) -> None:
    if len(description) > DESCRIPTION_MAX_CHARS:
        raise DescriptionError("description is too long")
    if _has_forbidden_chars(description):
        raise DescriptionError("description is invalid")


def new_habit(
    user_id: str,
    title: str,
    description: str,
    week_days: Iterable[int],
    today: date,
) -> Habit:
    """Build a new ACTIVE habit starting ``today``.

    Raises:
        TitleError, DescriptionError, EmptyScheduleError, InvalidScheduleError
    """
    validate_title(title)
    validate_description(description)
    schedule = TrackedWeekDays.of(week_days)

    return Habit(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=title,
        description=description,
        tracked_week_days=schedule,
        start_date=today,
        end_date=None,
        status=HabitStatus.ACTIVE,
    )
