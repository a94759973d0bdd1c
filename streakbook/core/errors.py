"""Domain errors.

Every ValidationError carries a message that is safe to show to the caller
verbatim. Storage failures live in the persistence port (StoreError) and are
never shown.
"""

from __future__ import annotations


class ValidationError(Exception):
    """Raised when caller-supplied input breaks a domain rule."""


class EmptyScheduleError(ValidationError):
    def __init__(self) -> None:
        super().__init__("at least one day of the week must be specified for tracking")


class InvalidScheduleError(ValidationError):
    def __init__(self) -> None:
        super().__init__("tracked days of the week are invalid: unrecognized day specified")


class OutOfWindowError(ValidationError):
    def __init__(self, window_days: int) -> None:
        super().__init__(
            f"date must be today or within the last {window_days} days"
        )
        self.window_days = window_days


class InvalidYearError(ValidationError):
    def __init__(self) -> None:
        super().__init__("invalid year")


class InvalidMonthError(ValidationError):
    def __init__(self) -> None:
        super().__init__("invalid month")


class InvalidDateError(ValidationError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"invalid date: expected YYYY-MM-DD, got {raw!r}")


class TitleError(ValidationError):
    """Title is too short, too long or contains forbidden characters."""


class DescriptionError(ValidationError):
    """Description is too long or contains forbidden characters."""


class HabitNotFoundError(Exception):
    """Raised when a habit does not exist or belongs to another user."""

    def __init__(self, habit_id: str) -> None:
        super().__init__(f"habit {habit_id} not found")
        self.habit_id = habit_id
