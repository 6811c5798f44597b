"""
Data quality checks for a record set before it enters the engine.

The engine tolerates all of these (it skips or degrades), so most findings
are informational. Catches problems early:
- Duplicate ids
- Records pointing at accounts that do not exist
- Recurring transactions that can never produce an occurrence
- Schedules that end before they start
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pandas as pd

from .loader import RecordSet


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a record set."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            lines.extend(f"  ✗ {e}" for e in self.errors)
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            lines.extend(f"  ⚠ {w}" for w in self.warnings)
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def _duplicates(ids: List[str]) -> List[str]:
    s = pd.Series(ids, dtype=object)
    return sorted(s[s.duplicated()].unique().tolist())


def validate_records(records: RecordSet) -> ValidationResult:
    """
    Run all checks on a record set. Never raises.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = ValidationResult()

    if not records.accounts:
        result.warnings.append("No accounts: the projection will be empty.")

    # --- Ids ---
    dup_accounts = _duplicates(records.account_ids)
    if dup_accounts:
        result.errors.append(f"Duplicate account ids: {dup_accounts}")

    dup_cps = _duplicates([cp.id for cp in records.checkpoints])
    if dup_cps:
        result.warnings.append(f"Duplicate checkpoint ids: {dup_cps}")

    dup_txs = _duplicates([tx.id for tx in records.transactions])
    if dup_txs:
        result.warnings.append(f"Duplicate transaction ids: {dup_txs}")

    # --- Account references ---
    known = set(records.account_ids)
    orphan_cps = [cp.id for cp in records.checkpoints if cp.account_id not in known]
    if orphan_cps:
        result.warnings.append(
            f"{len(orphan_cps)} checkpoints reference unknown accounts and will be ignored: {orphan_cps}"
        )
    orphan_txs = [tx.id for tx in records.transactions if tx.account_id not in known]
    if orphan_txs:
        result.warnings.append(
            f"{len(orphan_txs)} transactions reference unknown accounts and will be ignored: {orphan_txs}"
        )

    # --- Checkpoints ---
    if records.checkpoints:
        cps = pd.DataFrame(
            {
                "account_id": [cp.account_id for cp in records.checkpoints],
                "date": [cp.date for cp in records.checkpoints],
            }
        )
        same_day = cps[cps.duplicated(["account_id", "date"], keep=False)]
        for (account_id, day), _ in same_day.groupby(["account_id", "date"], sort=True):
            result.warnings.append(
                f"Account {account_id} has several checkpoints on {day}; the first one is used."
            )

    # --- Transactions ---
    zero = [tx.id for tx in records.transactions if tx.amount == 0]
    if zero:
        result.warnings.append(f"{len(zero)} transactions have a zero amount: {zero}")

    no_rule = [tx.id for tx in records.transactions if tx.is_recurring and tx.recurrence_rule is None]
    if no_rule:
        result.warnings.append(
            f"{len(no_rule)} recurring transactions have no recurrence rule and never occur: {no_rule}"
        )

    stray_rule = [
        tx.id for tx in records.transactions if not tx.is_recurring and tx.recurrence_rule is not None
    ]
    if stray_rule:
        result.warnings.append(
            f"{len(stray_rule)} one-time transactions carry a recurrence rule that is ignored: {stray_rule}"
        )

    ends_early = [
        tx.id for tx in records.transactions if tx.end_date is not None and tx.end_date < tx.date
    ]
    if ends_early:
        result.warnings.append(
            f"{len(ends_early)} transactions end before they start: {ends_early}"
        )

    return result
