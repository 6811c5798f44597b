"""
Display strings for amounts and recurrence rules (dashboard legend, badges, tables).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from core.money import Number, round_amount
from core.schema import FREQUENCY_LABELS, WEEK_OF_MONTH_LABELS, WEEKDAY_LABELS
from models.rules import (
    BiweeklyRule,
    DailyRule,
    DaysOfMonth,
    LastDayOfMonth,
    MonthlyRule,
    NthWeekday,
    RecurrenceRule,
    WeeklyRule,
    YearlyRule,
)

_ONE_PLACE = Decimal("0.1")


def format_currency(amount: Number) -> str:
    """"$1,234.56"; negatives as "-$1,234.56"."""
    value = round_amount(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_signed_currency(amount: Number) -> str:
    """"+$100.00" / "-$100.00"; zero has no sign."""
    value = round_amount(amount)
    if value > 0:
        return f"+{format_currency(value)}"
    return format_currency(value)


def format_compact_currency(amount: Number) -> str:
    """"$1.2K", "$3.4M"; below a thousand falls back to format_currency."""
    value = round_amount(amount)
    magnitude = abs(value)
    sign = "-" if value < 0 else ""
    for size, suffix in ((Decimal(1_000_000), "M"), (Decimal(1_000), "K")):
        if magnitude >= size:
            scaled = (magnitude / size).quantize(_ONE_PLACE, rounding=ROUND_HALF_UP)
            return f"{sign}${scaled}{suffix}"
    return format_currency(value)


def _ordinal_suffix(n: int) -> str:
    n = abs(n)
    if 11 <= n % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def format_ordinal_day(day: int) -> str:
    return f"{day}{_ordinal_suffix(day)}"


def _every(interval: int, unit: str, single: str) -> str:
    return single if interval == 1 else f"Every {interval} {unit}"


def _describe_monthly(rule: MonthlyRule) -> str:
    prefix = _every(rule.interval, "months", "Monthly")
    pattern = rule.pattern

    if isinstance(pattern, LastDayOfMonth):
        return f"{prefix} on the last day"
    if isinstance(pattern, DaysOfMonth):
        days = [format_ordinal_day(d) for d in pattern.days]
        if len(days) == 1:
            return f"{prefix} on the {days[0]}"
        return f"{prefix} on the {', '.join(days[:-1])} and {days[-1]}"
    if isinstance(pattern, NthWeekday):
        week = WEEK_OF_MONTH_LABELS[pattern.week].lower()
        return f"{prefix} on the {week} {WEEKDAY_LABELS[pattern.weekday]}"
    return prefix


def describe_rule(rule: Optional[RecurrenceRule]) -> str:
    """
    Human-readable schedule.

    >>> describe_rule(MonthlyRule(DaysOfMonth((15,))))
    'Monthly on the 15th'
    >>> describe_rule(WeeklyRule(interval=2))
    'Every 2 weeks'
    >>> describe_rule(MonthlyRule(NthWeekday(weekday=5, week=-1)))
    'Monthly on the last Friday'
    """
    if rule is None:
        return "One-time"
    if isinstance(rule, DailyRule):
        return _every(rule.interval, "days", "Daily")
    if isinstance(rule, WeeklyRule):
        return _every(rule.interval, "weeks", "Weekly")
    if isinstance(rule, BiweeklyRule):
        return "Bi-weekly"
    if isinstance(rule, MonthlyRule):
        return _describe_monthly(rule)
    if isinstance(rule, YearlyRule):
        return _every(rule.interval, "years", "Yearly")
    return "Unknown"


def describe_rule_short(rule: Optional[RecurrenceRule]) -> str:
    """Badge label: "Monthly", "2x Weekly", "Once"."""
    if rule is None:
        return "Once"
    label = FREQUENCY_LABELS.get(rule.frequency, rule.frequency)
    interval = getattr(rule, "interval", 1)
    if interval > 1:
        return f"{interval}x {label}"
    return label
