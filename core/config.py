"""
Projection configuration.
Horizon, warning threshold and recurrence budget for one projection run.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from . import dates
from .dates import to_date
from .money import parse_amount, round_amount
from .schema import DEFAULT_TIME_RANGE, DEFAULT_WARNING_THRESHOLD, MAX_RECURRENCE_ITERATIONS


@dataclass(frozen=True)
class ProjectionConfig:
    # None means "today" at run time; pin it for reproducible runs
    as_of_date: Optional[date] = None
    horizon_days: int = DEFAULT_TIME_RANGE
    warning_threshold: Decimal = DEFAULT_WARNING_THRESHOLD

    # ceiling on steps per recurrence expansion
    max_iterations: int = MAX_RECURRENCE_ITERATIONS

    def __post_init__(self) -> None:
        if self.horizon_days < 0:
            raise ValueError(f"horizon_days must be >= 0, got {self.horizon_days}")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be > 0, got {self.max_iterations}")
        if self.as_of_date is not None:
            object.__setattr__(self, "as_of_date", to_date(self.as_of_date))
        object.__setattr__(self, "warning_threshold", round_amount(self.warning_threshold))

    def resolved(self) -> "ProjectionConfig":
        """Copy with ``as_of_date`` pinned to today if it was left open."""
        if self.as_of_date is not None:
            return self
        return dataclasses.replace(self, as_of_date=dates.today())

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any], **overrides: Any) -> "ProjectionConfig":
        """
        Build a config from a user-settings record.

        Only ``warning_threshold`` is read from the record; it may be a number or
        money text ("$500"). Unparseable thresholds fall back to the default.
        """
        raw = settings.get("warning_threshold", settings.get("warningThreshold"))
        if isinstance(raw, str):
            threshold = parse_amount(raw)
        elif raw is None:
            threshold = None
        else:
            threshold = round_amount(raw)

        params = {"warning_threshold": threshold if threshold is not None else DEFAULT_WARNING_THRESHOLD}
        params.update(overrides)
        return cls(**params)
