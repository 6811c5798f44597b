from __future__ import annotations

from typing import List

import pandas as pd

from core.utils import require_columns
from models.projection import ProjectionResult

WARNING_COLUMNS: List[str] = ["date", "account_id", "account_name", "balance", "threshold"]


def warnings_frame(result: ProjectionResult, *, as_float: bool = True) -> pd.DataFrame:
    """One row per warning, in date order."""
    rows = [
        {
            "date": pd.Timestamp(w.date),
            "account_id": w.account_id,
            "account_name": w.account_name,
            "balance": float(w.balance) if as_float else w.balance,
            "threshold": float(w.threshold) if as_float else w.threshold,
        }
        for w in result.warnings
    ]
    return pd.DataFrame(rows, columns=WARNING_COLUMNS)


def aggregate_by_period(
    result: ProjectionResult, freq: str = "W", *, by_name: bool = False
) -> pd.DataFrame:
    """
    Roll the daily timeline up to periods (pandas offset alias: "W", "MS", "ME", ...).

    Returns
    -------
    DataFrame indexed by period label with two-level columns
    (account-or-"total", "min" | "end"): the lowest balance in the period and the
    balance on its last projected day.
    """
    daily = result.to_frame(by_name=by_name)
    require_columns(daily, ["total"])

    stats = ["min", "end"]
    if daily.empty:
        columns = pd.MultiIndex.from_product([list(daily.columns), stats])
        return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], name="date"))

    out = daily.resample(freq).agg(["min", "last"])
    return out.rename(columns={"last": "end"}, level=1)
