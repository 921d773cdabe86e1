"""
Request body validation for exercise records.

Validation is a declarative chain: an ordered list of FieldRule entries,
each pairing a body field with a predicate. Every rule is evaluated
(collect-all, no short-circuit) so the log shows the full list of
problems, even though clients only ever see one generic error.

The calendar rule is separate from the format rules. When calendar
enforcement is off, the calendar check still runs and is logged but never
rejects a body, which is how the service historically behaved.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .dates import is_valid_calendar_date, parse_log_date
from .models import ExerciseFields, WeightUnit

logger = logging.getLogger(__name__)

# Integers as the JSON body may carry them: 10 or "10". At most 19 digits,
# which is as wide as a BSON int64 gets
INTEGER_STRING_PATTERN = re.compile(r"[-+]?(?:0|[1-9][0-9]{0,18})")

# Largest value BSON can store as an integer
MAX_STORED_INT = 2**63 - 1

ALLOWED_UNITS = frozenset(unit.value for unit in WeightUnit)


class ExerciseValidationError(Exception):
    """Raised when a request body is not a well-formed exercise record."""

    def __init__(self, result: "ValidationResult") -> None:
        self.result = result
        super().__init__(
            f"Invalid exercise: {', '.join(result.failed_fields)}"
        )


@dataclass(frozen=True)
class FieldRule:
    """One link of the validation chain."""
    field: str
    check: Callable[[Any], bool]
    message: str


@dataclass
class ValidationResult:
    """Outcome of running the chain against a body."""
    failures: list[FieldRule] = field(default_factory=list)
    fields: Optional[ExerciseFields] = None

    @property
    def is_valid(self) -> bool:
        return not self.failures

    @property
    def failed_fields(self) -> list[str]:
        """Names of failing fields, in rule order, without repeats."""
        seen: list[str] = []
        for rule in self.failures:
            if rule.field not in seen:
                seen.append(rule.field)
        return seen


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def _to_int(value: Any) -> Optional[int]:
    """Read a JSON integer, a whole float (10.0) or an integer string; None otherwise."""
    # bool is an int subclass, but true/false are not rep counts
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and INTEGER_STRING_PATTERN.fullmatch(value):
        return int(value)
    return None


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value) >= 1


def is_positive_int(value: Any) -> bool:
    number = _to_int(value)
    return number is not None and 1 <= number <= MAX_STORED_INT


def is_weight_unit(value: Any) -> bool:
    return isinstance(value, str) and value in ALLOWED_UNITS


def is_log_date_format(value: Any) -> bool:
    return isinstance(value, str) and parse_log_date(value) is not None


def is_calendar_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parsed = parse_log_date(value)
    if parsed is None:
        return False
    month, day, year = parsed
    return is_valid_calendar_date(month, day, year)


EXERCISE_RULES: tuple[FieldRule, ...] = (
    FieldRule("name", is_non_empty_string, "must be a non-empty string"),
    FieldRule("reps", is_positive_int, "must be an integer >= 1"),
    FieldRule("weight", is_positive_int, "must be an integer >= 1"),
    FieldRule("unit", is_weight_unit, "must be 'kgs' or 'lbs'"),
    FieldRule("date", is_log_date_format, "must be formatted MM-DD-YY"),
)

CALENDAR_RULE = FieldRule("date", is_calendar_date, "must be a real calendar date")


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def validate_exercise(body: Any, enforce_calendar: bool = True) -> ValidationResult:
    """
    Run the validation chain against a raw request body.

    Args:
        body: Decoded JSON body. Anything other than an object fails
            every rule.
        enforce_calendar: Whether an impossible date (02-30-24) rejects
            the body. When False the calendar check is only logged.

    Returns:
        ValidationResult with parsed fields when the body is valid.
    """
    values = body if isinstance(body, dict) else {}
    result = ValidationResult()

    for rule in EXERCISE_RULES:
        if not rule.check(values.get(rule.field)):
            result.failures.append(rule)

    calendar_ok = CALENDAR_RULE.check(values.get(CALENDAR_RULE.field))
    if not calendar_ok:
        if enforce_calendar:
            result.failures.append(CALENDAR_RULE)
        else:
            logger.info(
                "Calendar check failed but is not enforced",
                extra={"date": values.get("date")}
            )

    if result.is_valid:
        result.fields = ExerciseFields(
            name=values["name"],
            reps=_to_int(values["reps"]),
            weight=_to_int(values["weight"]),
            unit=WeightUnit(values["unit"]),
            date=values["date"],
        )

    return result


def require_valid_exercise(body: Any, enforce_calendar: bool = True) -> ExerciseFields:
    """
    Validate a body and return its fields, or raise ExerciseValidationError.
    """
    result = validate_exercise(body, enforce_calendar=enforce_calendar)

    if not result.is_valid:
        logger.warning(
            "Rejected exercise body",
            extra={"failed_fields": result.failed_fields}
        )
        raise ExerciseValidationError(result)

    return result.fields
