"""
Recurrence expansion — turn a recurring transaction template into the concrete
dated occurrences that fall inside a query window.

Each frequency is a lazy stream of steps starting at the template's own date
(the anchor). A step is a pair (marker, candidates):
  - marker:     the date compared against the window end to stop the stream
  - candidates: the occurrence date(s) produced by that step (may be empty,
                e.g. a month without a 5th Friday)

iter_occurrences() consumes at most ``max_iterations`` steps, so pathological
inputs (tiny intervals, huge windows) end with a truncated but valid sequence
instead of hanging.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from itertools import count
from typing import Iterable, Iterator, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from core.dates import (
    DateLike,
    NonexistentDateError,
    clamp_days_of_month,
    last_day_of_month,
    nth_weekday_of_month,
    to_date,
)
from core.logging_config import get_logger
from core.schema import MAX_RECURRENCE_ITERATIONS, NEXT_OCCURRENCE_LOOKAHEAD_YEARS
from models.records import Transaction
from models.rules import (
    BiweeklyRule,
    DailyRule,
    DaysOfMonth,
    LastDayOfMonth,
    MonthlyRule,
    RecurrenceRule,
    WeeklyRule,
    YearlyRule,
)

logger = get_logger(__name__)

_Step = Tuple[date, Tuple[date, ...]]


@dataclass(frozen=True)
class ExpandedOccurrence:
    """One concrete instance of a recurring template; all non-date fields are inherited."""

    source_id: str
    date: date
    amount: Decimal
    description: str
    category: Optional[str]
    account_id: str


# --- Step streams ---

def _every_n_days(anchor: date, days: int) -> Iterator[_Step]:
    for k in count():
        d = anchor + timedelta(days=k * days)
        yield d, (d,)


def _monthly(anchor: date, rule: MonthlyRule) -> Iterator[_Step]:
    first = anchor.replace(day=1)
    pattern = rule.pattern
    for k in count():
        month_start = first + relativedelta(months=k * rule.interval)
        year, month = month_start.year, month_start.month

        if isinstance(pattern, DaysOfMonth):
            yield month_start, tuple(sorted(clamp_days_of_month(year, month, pattern.days)))
        elif isinstance(pattern, LastDayOfMonth):
            last = last_day_of_month(year, month)
            yield last, (last,)
        else:
            try:
                d = nth_weekday_of_month(year, month, pattern.weekday, pattern.week)
            except NonexistentDateError:
                yield month_start, ()
                continue
            yield d, (d,)


def _yearly(anchor: date, interval: int) -> Iterator[_Step]:
    # relativedelta clamps Feb 29 to Feb 28 in non-leap target years
    for k in count():
        d = anchor + relativedelta(years=k * interval)
        yield d, (d,)


def _steps(rule: RecurrenceRule, anchor: date) -> Optional[Iterator[_Step]]:
    if isinstance(rule, DailyRule):
        return _every_n_days(anchor, rule.interval)
    if isinstance(rule, WeeklyRule):
        return _every_n_days(anchor, 7 * rule.interval)
    if isinstance(rule, BiweeklyRule):
        return _every_n_days(anchor, 14)
    if isinstance(rule, MonthlyRule):
        return _monthly(anchor, rule)
    if isinstance(rule, YearlyRule):
        return _yearly(anchor, rule.interval)
    return None


# --- Public API ---

def iter_occurrences(
    transaction: Transaction,
    range_start: DateLike,
    range_end: DateLike,
    *,
    max_iterations: int = MAX_RECURRENCE_ITERATIONS,
) -> Iterator[ExpandedOccurrence]:
    """
    Lazily yield the occurrences of ``transaction`` inside [range_start, range_end].

    Occurrences never precede the anchor (``transaction.date``) nor follow
    ``transaction.end_date``; they come out in ascending date order. At most
    ``max_iterations`` schedule steps are taken.
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
    if not transaction.is_template:
        return

    start, end = to_date(range_start), to_date(range_end)
    anchor = transaction.date
    stop = transaction.end_date

    if anchor > end:
        return
    if stop is not None and stop < start:
        return

    steps = _steps(transaction.recurrence_rule, anchor)
    if steps is None:
        logger.warning(
            "Unsupported recurrence rule on transaction %s: %r",
            transaction.id,
            transaction.recurrence_rule,
        )
        return

    for steps_taken, (marker, candidates) in enumerate(steps, start=1):
        if marker > end or (stop is not None and marker > stop):
            return

        for d in candidates:
            if start <= d <= end and d >= anchor and (stop is None or d <= stop):
                yield ExpandedOccurrence(
                    source_id=transaction.id,
                    date=d,
                    amount=transaction.amount,
                    description=transaction.description,
                    category=transaction.category,
                    account_id=transaction.account_id,
                )

        if steps_taken >= max_iterations:
            logger.warning(
                "Recurrence expansion of transaction %s stopped at the %d-step ceiling",
                transaction.id,
                max_iterations,
                extra={"window_start": start, "window_end": end},
            )
            return


def expand(
    transaction: Transaction,
    range_start: DateLike,
    range_end: DateLike,
    *,
    max_iterations: int = MAX_RECURRENCE_ITERATIONS,
) -> List[ExpandedOccurrence]:
    return list(
        iter_occurrences(transaction, range_start, range_end, max_iterations=max_iterations)
    )


def expand_all(
    transactions: Iterable[Transaction],
    range_start: DateLike,
    range_end: DateLike,
    *,
    max_iterations: int = MAX_RECURRENCE_ITERATIONS,
) -> List[ExpandedOccurrence]:
    """Expand every recurring template; one-time transactions are ignored. Sorted by date."""
    occurrences: List[ExpandedOccurrence] = []
    for tx in transactions:
        occurrences.extend(expand(tx, range_start, range_end, max_iterations=max_iterations))
    occurrences.sort(key=lambda o: o.date)
    return occurrences


def next_occurrence(transaction: Transaction, after: DateLike) -> Optional[date]:
    """First occurrence strictly after ``after`` within the look-ahead window, else None."""
    if not transaction.is_template:
        return None

    after_d = to_date(after)
    window_end = after_d + relativedelta(years=NEXT_OCCURRENCE_LOOKAHEAD_YEARS)
    for occurrence in iter_occurrences(transaction, after_d, window_end):
        if occurrence.date > after_d:
            return occurrence.date
    return None
