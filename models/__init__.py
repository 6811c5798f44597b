"""
Domain models — inbound records, recurrence rules and projection output types.
"""

from .records import Account, BalanceCheckpoint, Transaction
from .rules import (
    BiweeklyRule,
    DailyRule,
    DaysOfMonth,
    LastDayOfMonth,
    MonthlyPattern,
    MonthlyRule,
    NthWeekday,
    RecurrenceRule,
    WeeklyRule,
    YearlyRule,
)
from .projection import ProjectionDataPoint, ProjectionResult, ProjectionWarning

__all__ = [
    "Account",
    "BalanceCheckpoint",
    "Transaction",
    "RecurrenceRule",
    "DailyRule",
    "WeeklyRule",
    "BiweeklyRule",
    "MonthlyRule",
    "YearlyRule",
    "MonthlyPattern",
    "DaysOfMonth",
    "LastDayOfMonth",
    "NthWeekday",
    "ProjectionDataPoint",
    "ProjectionWarning",
    "ProjectionResult",
]
