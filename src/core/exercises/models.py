"""
Domain models for the exercise log.

These models represent the core business concepts. They have no dependencies
on external frameworks, databases, or APIs. The record is expressible without
knowing how it's stored (a MongoDB document) or transmitted (JSON over HTTP).
"""

from dataclasses import asdict, dataclass
from enum import Enum


class WeightUnit(Enum):
    """Units a logged weight can be recorded in."""
    KGS = "kgs"
    LBS = "lbs"


@dataclass(frozen=True)
class ExerciseFields:
    """
    The mutable content of an exercise log entry.

    This is what a client sends on create and replace. Frozen because a
    replace always swaps the whole set of fields, never one at a time.
    """
    name: str
    reps: int
    weight: int
    unit: WeightUnit
    date: str  # MM-DD-YY

    def to_document(self) -> dict:
        """Flat representation stored in the collection."""
        document = asdict(self)
        document["unit"] = self.unit.value
        return document


@dataclass(frozen=True)
class ExerciseRecord:
    """
    A persisted exercise log entry.

    The id is assigned by the store at creation and never changes.
    """
    id: str
    name: str
    reps: int
    weight: int
    unit: WeightUnit
    date: str

    @classmethod
    def from_fields(cls, exercise_id: str, fields: ExerciseFields) -> "ExerciseRecord":
        return cls(
            id=exercise_id,
            name=fields.name,
            reps=fields.reps,
            weight=fields.weight,
            unit=fields.unit,
            date=fields.date,
        )

    @property
    def fields(self) -> ExerciseFields:
        """The record's content without its identifier."""
        return ExerciseFields(
            name=self.name,
            reps=self.reps,
            weight=self.weight,
            unit=self.unit,
            date=self.date,
        )
