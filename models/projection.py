from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import pandas as pd

from .records import Account


@dataclass(frozen=True)
class ProjectionDataPoint:
    """End-of-day balances; ``total`` is the exact cent sum of ``balances``."""

    date: date
    balances: Mapping[str, Decimal]
    total: Decimal

    def __post_init__(self) -> None:
        # read-only view; results are shared by the projection cache
        object.__setattr__(self, "balances", MappingProxyType(dict(self.balances)))


@dataclass(frozen=True)
class ProjectionWarning:
    date: date
    account_id: str
    account_name: str
    balance: Decimal
    threshold: Decimal


@dataclass(frozen=True)
class ProjectionResult:
    data_points: Tuple[ProjectionDataPoint, ...] = field(default_factory=tuple)
    warnings: Tuple[ProjectionWarning, ...] = field(default_factory=tuple)
    accounts: Tuple[Account, ...] = field(default_factory=tuple)
    # threshold the warnings were computed against; None for a hand-built result
    warning_threshold: Optional[Decimal] = None

    @property
    def account_names(self) -> Dict[str, str]:
        return {a.id: a.name for a in self.accounts}

    def column_labels(self, *, by_name: bool = False) -> Dict[str, str]:
        """
        Account id -> column label. With ``by_name``, a name shared by several
        accounts is suffixed with the id ("Checking (a1)") so labels stay unique.
        """
        if not by_name:
            return {a.id: a.id for a in self.accounts}
        counts = pd.Series([a.name for a in self.accounts], dtype=object).value_counts()
        return {
            a.id: f"{a.name} ({a.id})" if counts.get(a.name, 0) > 1 else a.name
            for a in self.accounts
        }

    def to_frame(self, *, by_name: bool = False, as_float: bool = True) -> pd.DataFrame:
        """
        Daily balances as a DataFrame: DatetimeIndex ``date``, one column per
        account (ids, or names with ``by_name``) and a trailing ``total`` column.

        Values are floats for plotting unless ``as_float=False``, which keeps the
        exact Decimals (object dtype).
        """
        labels = self.column_labels(by_name=by_name)
        columns: List[str] = [labels[a.id] for a in self.accounts] + ["total"]

        rows = []
        for point in self.data_points:
            row = {labels[acc_id]: bal for acc_id, bal in point.balances.items() if acc_id in labels}
            row["total"] = point.total
            rows.append(row)

        index = pd.DatetimeIndex([pd.Timestamp(p.date) for p in self.data_points], name="date")
        frame = pd.DataFrame(rows, index=index, columns=columns)
        if as_float:
            frame = frame.astype(float)
        return frame
