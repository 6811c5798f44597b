"""
Projection events — a uniform view of everything that moves a balance on a day.

Two kinds of event exist:
  - reset (checkpoint): the account balance becomes ``amount``
  - delta (transaction / recurring occurrence): ``amount`` is added

On the same date, resets sort before deltas, so a balance snapshot taken that
day takes effect before that day's transactions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Tuple

from core.logging_config import get_logger
from core.schema import MAX_RECURRENCE_ITERATIONS
from models.records import BalanceCheckpoint, Transaction

from .recurrence import iter_occurrences

logger = get_logger(__name__)


class EventType(str, Enum):
    CHECKPOINT = "checkpoint"
    TRANSACTION = "transaction"
    RECURRING = "recurring"


@dataclass(frozen=True)
class ProjectionEvent:
    type: EventType
    date: date
    account_id: str
    amount: Decimal
    description: str

    @property
    def is_reset(self) -> bool:
        return self.type is EventType.CHECKPOINT

    @property
    def sort_key(self) -> Tuple[date, int]:
        return (self.date, 0 if self.is_reset else 1)


def checkpoint_events(
    checkpoints: Iterable[BalanceCheckpoint], *, after: date, through: date
) -> List[ProjectionEvent]:
    """Checkpoints dated strictly after ``after`` and on/before ``through``."""
    return [
        ProjectionEvent(
            type=EventType.CHECKPOINT,
            date=cp.date,
            account_id=cp.account_id,
            amount=cp.amount,
            description=cp.notes or "Balance checkpoint",
        )
        for cp in checkpoints
        if after < cp.date <= through
    ]


def transaction_events(
    transactions: Iterable[Transaction], *, start: date, through: date
) -> List[ProjectionEvent]:
    """One-time transactions dated within [start, through]."""
    return [
        ProjectionEvent(
            type=EventType.TRANSACTION,
            date=tx.date,
            account_id=tx.account_id,
            amount=tx.amount,
            description=tx.description,
        )
        for tx in transactions
        if not tx.is_recurring and start <= tx.date <= through
    ]


def recurring_events(
    transactions: Iterable[Transaction],
    *,
    start: date,
    through: date,
    max_iterations: int = MAX_RECURRENCE_ITERATIONS,
) -> List[ProjectionEvent]:
    """Occurrences of every recurring template within [start, through]."""
    events: List[ProjectionEvent] = []
    for tx in transactions:
        if not tx.is_recurring:
            continue
        if tx.recurrence_rule is None:
            logger.debug("Recurring transaction %s has no rule; nothing to expand", tx.id)
            continue
        events.extend(
            ProjectionEvent(
                type=EventType.RECURRING,
                date=occ.date,
                account_id=occ.account_id,
                amount=occ.amount,
                description=occ.description,
            )
            for occ in iter_occurrences(tx, start, through, max_iterations=max_iterations)
        )
    return events


def collect_events(
    checkpoints: Iterable[BalanceCheckpoint],
    transactions: Iterable[Transaction],
    *,
    today: date,
    window_start: date,
    horizon_end: date,
    max_iterations: int = MAX_RECURRENCE_ITERATIONS,
) -> List[ProjectionEvent]:
    """
    Build and sort every event relevant to a projection.

    Parameters
    ----------
    checkpoints, transactions
        Full record sets; filtering happens here
    today
        Projection start; only checkpoints after it become reset events
    window_start
        Earliest anchor date across accounts; deltas before it are irrelevant
    horizon_end
        Last projected day (inclusive)

    Returns
    -------
    Events sorted by (date, resets first). The sort is stable, so same-day
    events of one kind keep their input order.
    """
    transactions = list(transactions)
    events = (
        checkpoint_events(checkpoints, after=today, through=horizon_end)
        + transaction_events(transactions, start=window_start, through=horizon_end)
        + recurring_events(
            transactions, start=window_start, through=horizon_end, max_iterations=max_iterations
        )
    )
    events.sort(key=lambda e: e.sort_key)
    return events
