"""
Headline numbers for a projection: where the combined balance starts, ends,
bottoms out and peaks, and which accounts dip below the warning threshold.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Optional, Tuple

import numpy as np

from core.money import Number, from_cents, round_amount, to_cents
from core.schema import DEFAULT_WARNING_THRESHOLD
from models.projection import ProjectionResult

_ZERO = round_amount(0)


@dataclass(frozen=True)
class ProjectionSummary:
    starting_total: Decimal = _ZERO
    ending_total: Decimal = _ZERO
    lowest_total: Decimal = _ZERO
    lowest_total_date: Optional[date] = None
    highest_total: Decimal = _ZERO
    highest_total_date: Optional[date] = None
    warning_count: int = 0
    # account names, in order of first warning
    accounts_with_warnings: Tuple[str, ...] = ()
    days_below_threshold: Dict[str, int] = field(default_factory=dict)


def _cents_matrix(result: ProjectionResult) -> np.ndarray:
    """(days, accounts) int64 cents, accounts in result.accounts order; missing -> 0."""
    ids = [a.id for a in result.accounts]
    return np.array(
        [[to_cents(p.balances.get(acc_id, 0)) for acc_id in ids] for p in result.data_points],
        dtype=np.int64,
    ).reshape(len(result.data_points), len(ids))


def summarize(
    result: ProjectionResult, *, threshold: Optional[Number] = None
) -> ProjectionSummary:
    """
    Summarize a projection.

    Parameters
    ----------
    result : ProjectionResult
        Output of engine.project() / run_projection()
    threshold : number, optional
        Level for ``days_below_threshold``. Defaults to the threshold the
        projection ran with, else the one carried by its warnings, else the
        application default.

    Returns
    -------
    ProjectionSummary. An empty result gives zero totals and no dates.
    Ties on lowest/highest resolve to the earliest date.
    """
    if not result.data_points:
        return ProjectionSummary()

    if threshold is None:
        threshold = result.warning_threshold
    if threshold is None:
        threshold = result.warnings[0].threshold if result.warnings else DEFAULT_WARNING_THRESHOLD

    totals = np.array([to_cents(p.total) for p in result.data_points], dtype=np.int64)
    lo = int(np.argmin(totals))
    hi = int(np.argmax(totals))

    below = _cents_matrix(result) < to_cents(threshold)
    per_account = below.sum(axis=0)
    days_below = {a.id: int(n) for a, n in zip(result.accounts, per_account)}

    names = tuple(dict.fromkeys(w.account_name for w in result.warnings))

    return ProjectionSummary(
        starting_total=from_cents(int(totals[0])),
        ending_total=from_cents(int(totals[-1])),
        lowest_total=from_cents(int(totals[lo])),
        lowest_total_date=result.data_points[lo].date,
        highest_total=from_cents(int(totals[hi])),
        highest_total_date=result.data_points[hi].date,
        warning_count=len(result.warnings),
        accounts_with_warnings=names,
        days_below_threshold=days_below,
    )
