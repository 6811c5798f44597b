"""
Core package — constants, configuration, money and calendar helpers, logging.
No business logic lives here.
"""

import logging

from .config import ProjectionConfig
from .dates import NonexistentDateError, date_range, to_date
from .logging_config import ROOT_LOGGER, get_logger, setup_logging
from .money import add, parse_amount, round_amount, subtract, sum_amounts
from .utils import require_columns

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())

__all__ = [
    "ProjectionConfig",
    "NonexistentDateError",
    "date_range",
    "to_date",
    "get_logger",
    "setup_logging",
    "add",
    "subtract",
    "sum_amounts",
    "round_amount",
    "parse_amount",
    "require_columns",
]
