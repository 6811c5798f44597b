"""
Cash-flow projection engine — recurrence expansion, event collection, daily balance walk.
"""

from .events import EventType, ProjectionEvent, collect_events
from .projection import Anchor, account_balance, project
from .recurrence import ExpandedOccurrence, expand, expand_all, iter_occurrences, next_occurrence
from .runner import cached_projection, clear_projection_cache, run_projection

__all__ = [
    "EventType",
    "ProjectionEvent",
    "collect_events",
    "Anchor",
    "project",
    "account_balance",
    "ExpandedOccurrence",
    "iter_occurrences",
    "expand",
    "expand_all",
    "next_occurrence",
    "run_projection",
    "cached_projection",
    "clear_projection_cache",
]
