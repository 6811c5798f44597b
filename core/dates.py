"""
Calendar helpers for the projection engine.

Everything works at day granularity on ``datetime.date``. Months are 1-12 and
weekdays follow the stored-rule convention 0 = Sunday .. 6 = Saturday.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, List, Union

import pandas as pd

from .schema import WEEKDAY_LABELS, WEEK_OF_MONTH_LABELS

DateLike = Union[date, datetime, pd.Timestamp, str]


class NonexistentDateError(ValueError):
    """The requested n-th weekday does not occur in that month."""


def to_date(value: DateLike) -> date:
    """Coerce a date, datetime, Timestamp or ISO string to a plain date."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"Not a date: {value!r}")
    return ts.normalize().date()


def today() -> date:
    return date.today()


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, days_in_month(year, month))


def _python_weekday(weekday: int) -> int:
    # date.weekday() counts Monday as 0; stored rules count Sunday as 0.
    return (weekday - 1) % 7


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> date:
    """
    The n-th ``weekday`` (0 = Sunday) of the month, or the last one when n == -1.

    Raises NonexistentDateError when the month is too short for the n-th
    occurrence (e.g. a 5th Friday in a four-Friday month); callers skip the
    month. Raises ValueError for an illegal ``n`` or ``weekday``.
    """
    if n not in WEEK_OF_MONTH_LABELS:
        raise ValueError(f"Invalid week of month: {n}. Must be 1-5 or -1 for last.")
    if not 0 <= weekday <= 6:
        raise ValueError(f"Invalid weekday: {weekday}. Must be 0-6.")

    target = _python_weekday(weekday)

    if n == -1:
        last = last_day_of_month(year, month)
        return last - timedelta(days=(last.weekday() - target) % 7)

    first = date(year, month, 1)
    first_occurrence = 1 + (target - first.weekday()) % 7
    day = first_occurrence + (n - 1) * 7
    if day > days_in_month(year, month):
        raise NonexistentDateError(
            f"The {WEEK_OF_MONTH_LABELS[n]} {WEEKDAY_LABELS[weekday]} doesn't exist in "
            f"{calendar.month_name[month]} {year}"
        )
    return date(year, month, day)


def last_weekday_of_month(year: int, month: int, weekday: int) -> date:
    return nth_weekday_of_month(year, month, weekday, -1)


def clamp_day(year: int, month: int, day: int) -> date:
    """``day`` of the month, capped at the month's length (31 -> 28/29 in February)."""
    return date(year, month, min(day, days_in_month(year, month)))


def clamp_days_of_month(year: int, month: int, days: Iterable[int]) -> List[date]:
    return [clamp_day(year, month, d) for d in days]


def _day(value: DateLike) -> date:
    return value if type(value) is date else to_date(value)


def is_before(a: DateLike, b: DateLike) -> bool:
    return _day(a) < _day(b)


def is_after(a: DateLike, b: DateLike) -> bool:
    return _day(a) > _day(b)


def is_same_day(a: DateLike, b: DateLike) -> bool:
    return _day(a) == _day(b)


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def date_range(start: DateLike, end: DateLike) -> List[date]:
    """Every calendar day from ``start`` to ``end`` inclusive (empty if start > end)."""
    start_d, end_d = _day(start), _day(end)
    if start_d > end_d:
        return []
    return [ts.date() for ts in pd.date_range(start_d, end_d, freq="D")]
