"""Pytest configuration and shared record factories.

The factories build plain model instances with sensible defaults so each test
only spells out the fields it cares about. Every projection test injects
``today``; nothing here reads the clock.
"""

from __future__ import annotations

import itertools
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.dates import to_date  # noqa: E402
from engine.runner import clear_projection_cache  # noqa: E402
from models.records import Account, BalanceCheckpoint, Transaction  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_projection_cache():
    clear_projection_cache()
    yield
    clear_projection_cache()


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def account_factory():
    """Factory for Account records; ids default to acc-1, acc-2, ..."""
    counter = itertools.count(1)

    def _create(id: str | None = None, name: str | None = None) -> Account:
        n = next(counter)
        return Account(id=id or f"acc-{n}", name=name or f"Account {n}")

    return _create


@pytest.fixture
def checkpoint_factory():
    """Factory for BalanceCheckpoint records."""
    counter = itertools.count(1)

    def _create(
        account_id: str = "acc-1",
        on: object = "2024-01-01",
        amount: object = "1000.00",
        id: str | None = None,
        notes: str | None = None,
    ) -> BalanceCheckpoint:
        return BalanceCheckpoint(
            id=id or f"cp-{next(counter)}",
            account_id=account_id,
            date=to_date(on),
            amount=amount,
            notes=notes,
        )

    return _create


@pytest.fixture
def transaction_factory():
    """Factory for Transaction records; pass ``rule`` to get a recurring template."""
    counter = itertools.count(1)

    def _create(
        account_id: str = "acc-1",
        on: object = "2024-01-01",
        amount: object = "-10.00",
        rule=None,
        end: object = None,
        id: str | None = None,
        description: str = "Test transaction",
        category: str | None = None,
        is_recurring: bool | None = None,
    ) -> Transaction:
        return Transaction(
            id=id or f"tx-{next(counter)}",
            account_id=account_id,
            description=description,
            amount=amount,
            date=to_date(on),
            category=category,
            is_recurring=rule is not None if is_recurring is None else is_recurring,
            recurrence_rule=rule,
            end_date=to_date(end) if end is not None else None,
        )

    return _create
