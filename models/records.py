"""
Inbound records handed to the engine by the data-access collaborator.
Frozen so that record sets are hashable and can key a memoized projection.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from core.money import round_amount

from .rules import RecurrenceRule


@dataclass(frozen=True)
class Account:
    id: str
    name: str


@dataclass(frozen=True)
class BalanceCheckpoint:
    """A known-true balance for an account on a date; anchors all math for it."""

    id: str
    account_id: str
    date: date
    amount: Decimal
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", round_amount(self.amount))


@dataclass(frozen=True)
class Transaction:
    """
    A one-time cash movement, or the template of a recurring one.

    amount is signed: positive = inflow, negative = outflow. For templates,
    ``date`` is the anchor of the schedule and ``end_date`` (inclusive) its last
    possible day.
    """

    id: str
    account_id: str
    description: str
    amount: Decimal
    date: date
    category: Optional[str] = None
    is_recurring: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None
    end_date: Optional[date] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", round_amount(self.amount))

    @property
    def is_template(self) -> bool:
        return self.is_recurring and self.recurrence_rule is not None
