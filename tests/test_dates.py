"""Tests for the calendar helpers (0 = Sunday weekday convention)."""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from core.dates import (
    NonexistentDateError,
    add_days,
    clamp_day,
    clamp_days_of_month,
    date_range,
    days_in_month,
    is_after,
    is_before,
    is_leap_year,
    is_same_day,
    last_day_of_month,
    last_weekday_of_month,
    nth_weekday_of_month,
    to_date,
)

SUNDAY, MONDAY, FRIDAY, SATURDAY = 0, 1, 5, 6


class TestCoercion:
    def test_to_date_accepts_common_inputs(self):
        assert to_date(date(2024, 3, 1)) == date(2024, 3, 1)
        assert to_date(datetime(2024, 3, 1, 23, 59)) == date(2024, 3, 1)
        assert to_date(pd.Timestamp("2024-03-01 08:00")) == date(2024, 3, 1)
        assert to_date("2024-03-01") == date(2024, 3, 1)

    def test_to_date_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_date("not a date")

    def test_comparisons_ignore_time_of_day(self):
        morning = datetime(2024, 1, 15, 8, 0)
        evening = datetime(2024, 1, 15, 22, 0)
        assert is_same_day(morning, evening)
        assert not is_before(morning, evening)
        assert not is_after(evening, morning)
        assert is_before("2024-01-14", morning)
        assert is_after(date(2024, 1, 16), evening)


class TestMonthLengths:
    @pytest.mark.parametrize(
        "year, month, expected",
        [(2024, 2, 29), (2023, 2, 28), (2024, 4, 30), (2024, 12, 31), (1900, 2, 28), (2000, 2, 29)],
    )
    def test_days_in_month(self, year, month, expected):
        assert days_in_month(year, month) == expected

    def test_leap_years(self):
        assert is_leap_year(2024)
        assert is_leap_year(2000)
        assert not is_leap_year(1900)
        assert not is_leap_year(2023)

    def test_last_day_of_month(self):
        assert last_day_of_month(2024, 2) == date(2024, 2, 29)
        assert last_day_of_month(2023, 2) == date(2023, 2, 28)

    def test_clamp_day(self):
        assert clamp_day(2024, 2, 31) == date(2024, 2, 29)
        assert clamp_day(2024, 4, 31) == date(2024, 4, 30)
        assert clamp_day(2024, 1, 15) == date(2024, 1, 15)

    def test_clamp_days_keeps_input_order_and_duplicates(self):
        assert clamp_days_of_month(2023, 2, [30, 1, 31]) == [
            date(2023, 2, 28),
            date(2023, 2, 1),
            date(2023, 2, 28),
        ]


class TestNthWeekday:
    """January 2024 starts on a Monday and has five Wednesdays."""

    def test_first_friday(self):
        assert nth_weekday_of_month(2024, 1, FRIDAY, 1) == date(2024, 1, 5)

    def test_first_sunday(self):
        assert nth_weekday_of_month(2024, 1, SUNDAY, 1) == date(2024, 1, 7)

    def test_second_monday(self):
        assert nth_weekday_of_month(2024, 1, MONDAY, 2) == date(2024, 1, 8)

    def test_fifth_wednesday_exists_in_january(self):
        assert nth_weekday_of_month(2024, 1, 3, 5) == date(2024, 1, 31)

    def test_fifth_friday_missing_raises(self):
        # February 2024: Fridays on 2, 9, 16, 23 only
        with pytest.raises(NonexistentDateError):
            nth_weekday_of_month(2024, 2, FRIDAY, 5)

    def test_last_weekday(self):
        assert nth_weekday_of_month(2024, 1, FRIDAY, -1) == date(2024, 1, 26)
        assert last_weekday_of_month(2024, 2, SATURDAY) == date(2024, 2, 24)
        assert last_weekday_of_month(2024, 3, SUNDAY) == date(2024, 3, 31)

    @pytest.mark.parametrize("n", [0, 6, -2])
    def test_illegal_week_raises_value_error(self, n):
        with pytest.raises(ValueError) as exc:
            nth_weekday_of_month(2024, 1, FRIDAY, n)
        assert not isinstance(exc.value, NonexistentDateError)

    def test_illegal_weekday_raises_value_error(self):
        with pytest.raises(ValueError):
            nth_weekday_of_month(2024, 1, 7, 1)


class TestRanges:
    def test_inclusive_range(self):
        days = date_range(date(2024, 2, 27), date(2024, 3, 1))
        assert days == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]

    def test_single_day(self):
        assert date_range("2024-01-01", "2024-01-01") == [date(2024, 1, 1)]

    def test_reversed_range_is_empty(self):
        assert date_range(date(2024, 1, 2), date(2024, 1, 1)) == []

    def test_add_days(self):
        assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)
