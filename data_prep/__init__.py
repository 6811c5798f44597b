"""
Data preparation — loading plain collaborator records into models, validation.
"""

from .loader import RecordError, RecordSet, load_records, load_snapshot, parse_rule
from .validators import ValidationResult, validate_records

__all__ = [
    "RecordError",
    "RecordSet",
    "load_records",
    "load_snapshot",
    "parse_rule",
    "ValidationResult",
    "validate_records",
]
