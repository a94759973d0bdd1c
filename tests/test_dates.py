"""Tests for streakbook.core.dates — calendar helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from streakbook.core import dates
from streakbook.core.errors import InvalidDateError, InvalidMonthError, InvalidYearError


class TestMonthBoundaries:
    def test_first_of_month(self):
        assert dates.first_of_month(date(2024, 7, 19)) == date(2024, 7, 1)

    def test_days_in_month(self):
        assert dates.days_in_month(date(2024, 7, 5)) == 31
        assert dates.days_in_month(date(2024, 4, 5)) == 30

    def test_days_in_february_leap_year(self):
        assert dates.days_in_month(date(2024, 2, 1)) == 29
        assert dates.days_in_month(date(2025, 2, 1)) == 28

    def test_last_of_month(self):
        assert dates.last_of_month(date(2024, 2, 10)) == date(2024, 2, 29)

    def test_month_anchor(self):
        assert dates.month_anchor(2024, 12) == date(2024, 12, 1)


class TestArithmetic:
    def test_add_days_crosses_month(self):
        assert dates.add_days(date(2024, 7, 31), 1) == date(2024, 8, 1)

    def test_add_negative_days(self):
        assert dates.add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)

    def test_weekday_monday_is_zero(self):
        # 2024-07-01 was a Monday
        assert dates.weekday(date(2024, 7, 1)) == 0
        assert dates.weekday(date(2024, 7, 7)) == 6


class TestFromDatetime:
    def test_aware_datetime_normalized_to_utc(self):
        tz = timezone(timedelta(hours=3))
        dt = datetime(2024, 7, 1, 1, 30, tzinfo=tz)  # 2024-06-30 22:30 UTC
        assert dates.from_datetime(dt) == date(2024, 6, 30)

    def test_naive_datetime_taken_as_utc(self):
        assert dates.from_datetime(datetime(2024, 7, 1, 23, 59)) == date(2024, 7, 1)

    def test_today_utc_is_a_date(self):
        today = dates.today_utc()
        assert type(today) is date


class TestParseIsoDate:
    def test_valid(self):
        assert dates.parse_iso_date("2024-07-15") == date(2024, 7, 15)

    @pytest.mark.parametrize("raw", ["", "2024-7-15x", "15/07/2024", "2024-02-30", "2024-07-15T10:00:00"])
    def test_invalid(self, raw):
        with pytest.raises(InvalidDateError):
            dates.parse_iso_date(raw)

    @pytest.mark.parametrize("raw", ["2024-7-1", "2024-07-1", "2024-7-01", "20240701", " 2024-07-01"])
    def test_unpadded_or_compact_rejected(self, raw):
        with pytest.raises(InvalidDateError):
            dates.parse_iso_date(raw)

    def test_non_string_rejected(self):
        with pytest.raises(InvalidDateError):
            dates.parse_iso_date(20240701)


class TestValidation:
    def test_year_range(self):
        today = date(2024, 7, 31)
        dates.validate_year(2024, today)
        dates.validate_year(2025, today)

    def test_year_too_old(self):
        with pytest.raises(InvalidYearError):
            dates.validate_year(2023, date(2024, 7, 31))

    def test_year_too_far_ahead(self):
        with pytest.raises(InvalidYearError):
            dates.validate_year(2026, date(2024, 7, 31))

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, month):
        with pytest.raises(InvalidMonthError):
            dates.validate_month(month)

    def test_valid_months(self):
        for month in range(1, 13):
            dates.validate_month(month)
