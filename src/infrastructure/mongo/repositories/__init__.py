"""
Repository pattern implementations for MongoDB.

Repositories translate between domain models and stored documents.
"""

from .exercises import (
    ExerciseNotFoundError,
    ExercisePersistenceError,
    ExerciseRepository,
    InvalidExerciseIdError,
)

__all__ = [
    "ExerciseNotFoundError",
    "ExercisePersistenceError",
    "ExerciseRepository",
    "InvalidExerciseIdError",
]
