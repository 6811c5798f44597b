"""
Reports — summary statistics, pandas views and display formatting of a projection.
"""

from .summary import ProjectionSummary, summarize
from .frames import aggregate_by_period, warnings_frame
from .formatting import (
    describe_rule,
    describe_rule_short,
    format_compact_currency,
    format_currency,
    format_ordinal_day,
    format_signed_currency,
)

__all__ = [
    "ProjectionSummary",
    "summarize",
    "warnings_frame",
    "aggregate_by_period",
    "format_currency",
    "format_signed_currency",
    "format_compact_currency",
    "format_ordinal_day",
    "describe_rule",
    "describe_rule_short",
]
