"""
Recurrence rules as a tagged union.

Each frequency is its own type, and a monthly rule carries exactly one
pattern (days of month, last day, or n-th weekday), so the mutually
exclusive sub-modes cannot be combined by accident.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

from core.schema import WEEK_OF_MONTH_LABELS


def _check_interval(interval: int) -> None:
    if interval < 1:
        raise ValueError(f"interval must be >= 1, got {interval}")


# --- Monthly patterns ---

@dataclass(frozen=True)
class DaysOfMonth:
    """Fixed day(s) of the month, each clamped to the month's length."""

    days: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", tuple(self.days))
        if not self.days:
            raise ValueError("DaysOfMonth needs at least one day.")
        bad = [d for d in self.days if not 1 <= d <= 31]
        if bad:
            raise ValueError(f"Days of month must be 1-31, got {bad}")


@dataclass(frozen=True)
class LastDayOfMonth:
    pass


@dataclass(frozen=True)
class NthWeekday:
    """n-th weekday of the month; weekday 0 = Sunday, week -1 = last."""

    weekday: int
    week: int

    def __post_init__(self) -> None:
        if not 0 <= self.weekday <= 6:
            raise ValueError(f"weekday must be 0-6, got {self.weekday}")
        if self.week not in WEEK_OF_MONTH_LABELS:
            raise ValueError(f"week must be 1-5 or -1, got {self.week}")


MonthlyPattern = Union[DaysOfMonth, LastDayOfMonth, NthWeekday]


# --- Rules ---

@dataclass(frozen=True)
class DailyRule:
    frequency: ClassVar[str] = "daily"
    interval: int = 1

    def __post_init__(self) -> None:
        _check_interval(self.interval)


@dataclass(frozen=True)
class WeeklyRule:
    frequency: ClassVar[str] = "weekly"
    interval: int = 1

    def __post_init__(self) -> None:
        _check_interval(self.interval)


@dataclass(frozen=True)
class BiweeklyRule:
    """Every 14 days from the anchor; takes no interval."""

    frequency: ClassVar[str] = "biweekly"


@dataclass(frozen=True)
class MonthlyRule:
    pattern: MonthlyPattern
    interval: int = 1
    frequency: ClassVar[str] = "monthly"

    def __post_init__(self) -> None:
        _check_interval(self.interval)
        if not isinstance(self.pattern, (DaysOfMonth, LastDayOfMonth, NthWeekday)):
            raise ValueError(f"Unknown monthly pattern: {self.pattern!r}")


@dataclass(frozen=True)
class YearlyRule:
    frequency: ClassVar[str] = "yearly"
    interval: int = 1

    def __post_init__(self) -> None:
        _check_interval(self.interval)


RecurrenceRule = Union[DailyRule, WeeklyRule, BiweeklyRule, MonthlyRule, YearlyRule]
