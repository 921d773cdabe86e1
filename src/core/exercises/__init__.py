"""
Exercise log domain.

Contains the record model, request validation, and the calendar rules
used to check logged dates.
"""

from .dates import is_leap_year, is_valid_calendar_date, parse_log_date
from .models import ExerciseFields, ExerciseRecord, WeightUnit
from .validation import (
    ExerciseValidationError,
    FieldRule,
    ValidationResult,
    require_valid_exercise,
    validate_exercise,
)

__all__ = [
    "ExerciseFields",
    "ExerciseRecord",
    "WeightUnit",
    "is_leap_year",
    "is_valid_calendar_date",
    "parse_log_date",
    "ExerciseValidationError",
    "FieldRule",
    "ValidationResult",
    "require_valid_exercise",
    "validate_exercise",
]
