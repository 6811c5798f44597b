from __future__ import annotations

from decimal import Decimal
from typing import Dict, Tuple

# Record fields the data-access collaborator hands us (snake_case canonical names).
ACCOUNT_FIELDS: Tuple[str, ...] = ("id", "name")

CHECKPOINT_FIELDS: Tuple[str, ...] = (
    "id",
    "account_id",
    "date",
    "amount",
    "notes",
)

TRANSACTION_FIELDS: Tuple[str, ...] = (
    "id",
    "account_id",
    "description",
    "amount",
    "category",
    "date",
    "is_recurring",
    "recurrence_rule",
    "end_date",
)

FREQUENCIES: Tuple[str, ...] = ("daily", "weekly", "biweekly", "monthly", "yearly")

FREQUENCY_LABELS: Dict[str, str] = {
    "daily": "Daily",
    "weekly": "Weekly",
    "biweekly": "Bi-weekly",
    "monthly": "Monthly",
    "yearly": "Yearly",
}

# 0 = Sunday, matching the weekday numbering used by stored recurrence rules.
WEEKDAY_LABELS: Tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

WEEK_OF_MONTH_LABELS: Dict[int, str] = {
    1: "1st",
    2: "2nd",
    3: "3rd",
    4: "4th",
    5: "5th",
    -1: "Last",
}

# Horizons offered by the dashboard time-range selector (days).
TIME_RANGE_OPTIONS: Tuple[int, ...] = (15, 30, 90, 180, 360)
DEFAULT_TIME_RANGE: int = 30

DEFAULT_WARNING_THRESHOLD: Decimal = Decimal("500.00")

# Safety ceiling for every recurrence generation loop.
MAX_RECURRENCE_ITERATIONS: int = 1000

# How far ahead next_occurrence() looks before giving up.
NEXT_OCCURRENCE_LOOKAHEAD_YEARS: int = 2
