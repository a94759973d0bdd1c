"""Weekly schedule model.

A habit is tracked on a subset of weekdays. The subset is stored as a 7-bit
mask, bit *i* (LSB-first) set iff weekday *i* is tracked, Monday being bit 0.
The mask is only exposed at the storage and serialization boundary; the rest
of the code goes through TrackedWeekDays.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable

from streakbook.core.errors import EmptyScheduleError, InvalidScheduleError

_MASK_MAX = (1 << 7) - 1


class WeekDay(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


def validate(mask: int) -> None:
    """Reject an empty mask or one with bits above Sunday."""
    if mask == 0:
        raise EmptyScheduleError()
    if mask < 0 or mask > _MASK_MAX:
        raise InvalidScheduleError()


def from_week_days(*days: int) -> int:
    """OR each day into a mask and validate the result."""
    mask = 0
    for day in days:
        if not 0 <= int(day) <= WeekDay.SUNDAY:
            raise InvalidScheduleError()
        mask |= 1 << int(day)
    validate(mask)
    return mask


def to_week_days(mask: int) -> list[WeekDay]:
    """List tracked weekdays, Monday first."""
    return [WeekDay(i) for i in range(7) if (mask >> i) & 1]


@dataclass(frozen=True)
class TrackedWeekDays:
    """Validated set of tracked weekdays."""

    mask: int

    def __post_init__(self) -> None:
        validate(self.mask)

    @classmethod
    def of(cls, days: Iterable[int]) -> TrackedWeekDays:
        return cls(from_week_days(*days))

    def tracks(self, day: int) -> bool:
        return bool((self.mask >> int(day)) & 1)

    def week_days(self) -> list[WeekDay]:
        return to_week_days(self.mask)
