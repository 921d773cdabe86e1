"""
MongoDB repository for exercise records.

This module implements the repository pattern for exercise data access.
The repository:
1. Translates between ExerciseRecord and stored documents
2. Encapsulates every collection call
3. Wraps driver failures in domain exceptions

Each public method is exactly one round trip to the collection.
"""

import logging
from typing import Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidDocument, InvalidId
from pymongo.errors import PyMongoError

from src.core.exercises.models import ExerciseFields, ExerciseRecord, WeightUnit

logger = logging.getLogger(__name__)

# Writes can also fail while the document is encoded, before anything is sent
WRITE_ERRORS = (PyMongoError, OverflowError, InvalidDocument)


class ExerciseCollection(Protocol):
    """
    Protocol for the async collection the repository talks to.

    Satisfied by pymongo's AsyncCollection and by MockCollection, so tests
    don't need a MongoDB server.
    """

    async def insert_one(self, document: dict): ...
    def find(self, filter: Optional[dict] = None): ...
    async def find_one(self, filter: Optional[dict] = None): ...
    async def replace_one(self, filter: dict, replacement: dict): ...
    async def delete_one(self, filter: dict): ...


class ExercisePersistenceError(Exception):
    """Raised when a store operation fails."""
    pass


class InvalidExerciseIdError(ExercisePersistenceError):
    """Raised when an id can't be an ObjectId, before any round trip."""
    pass


class ExerciseNotFoundError(Exception):
    """Raised when a requested exercise doesn't exist."""
    pass


def _to_object_id(exercise_id: str) -> ObjectId:
    try:
        return ObjectId(exercise_id)
    except (InvalidId, TypeError) as e:
        raise InvalidExerciseIdError(f"Malformed exercise id: {exercise_id!r}") from e


def _document_to_record(document: dict) -> ExerciseRecord:
    return ExerciseRecord(
        id=str(document["_id"]),
        name=document["name"],
        reps=document["reps"],
        weight=document["weight"],
        unit=WeightUnit(document["unit"]),
        date=document["date"],
    )


class ExerciseRepository:
    """
    Repository for exercise record persistence.

    Operations map one to one onto the HTTP surface:
    - create_exercise: insert a new record, id assigned by the store
    - find_exercises: every record in the collection
    - find_exercise_by_id: one record
    - replace_exercise: overwrite all fields of one record
    - delete_exercise: remove one record permanently
    """

    def __init__(self, collection: ExerciseCollection) -> None:
        self._collection = collection

    async def create_exercise(self, fields: ExerciseFields) -> ExerciseRecord:
        """Insert a record and return it with its generated id."""
        try:
            result = await self._collection.insert_one(fields.to_document())
        except WRITE_ERRORS as e:
            logger.error(
                "Failed to create exercise",
                extra={"exercise_name": fields.name, "error": str(e)}
            )
            raise ExercisePersistenceError(f"Create failed: {e}") from e

        record = ExerciseRecord.from_fields(str(result.inserted_id), fields)
        logger.info("Created exercise", extra={"exercise_id": record.id})
        return record

    async def find_exercises(self, filter: Optional[dict] = None) -> list[ExerciseRecord]:
        """
        List records matching a filter, in stored order.

        The HTTP surface never passes a filter, so this returns the whole
        collection. An empty collection is an empty list, not an error.
        """
        try:
            documents = await self._collection.find(filter or {}).to_list(None)
        except PyMongoError as e:
            logger.error("Failed to list exercises", extra={"error": str(e)})
            raise ExercisePersistenceError(f"List failed: {e}") from e

        return [_document_to_record(doc) for doc in documents]

    async def find_exercise_by_id(self, exercise_id: str) -> ExerciseRecord:
        """
        Load one record.

        Raises:
            InvalidExerciseIdError: id is not a valid ObjectId
            ExerciseNotFoundError: no record has this id
            ExercisePersistenceError: the store call failed
        """
        object_id = _to_object_id(exercise_id)

        try:
            document = await self._collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(
                "Failed to load exercise",
                extra={"exercise_id": exercise_id, "error": str(e)}
            )
            raise ExercisePersistenceError(f"Lookup failed: {e}") from e

        if document is None:
            raise ExerciseNotFoundError(f"Exercise {exercise_id} not found")

        return _document_to_record(document)

    async def replace_exercise(self, exercise_id: str, fields: ExerciseFields) -> int:
        """
        Overwrite every field of a record.

        Returns the number of records matched (0 or 1). Matched rather than
        modified, so replacing a record with identical values still counts.
        """
        object_id = _to_object_id(exercise_id)

        try:
            result = await self._collection.replace_one(
                {"_id": object_id}, fields.to_document()
            )
        except WRITE_ERRORS as e:
            logger.error(
                "Failed to replace exercise",
                extra={"exercise_id": exercise_id, "error": str(e)}
            )
            raise ExercisePersistenceError(f"Replace failed: {e}") from e

        return result.matched_count

    async def delete_exercise(self, exercise_id: str) -> int:
        """Delete a record. Returns the number deleted (0 or 1)."""
        object_id = _to_object_id(exercise_id)

        try:
            result = await self._collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(
                "Failed to delete exercise",
                extra={"exercise_id": exercise_id, "error": str(e)}
            )
            raise ExercisePersistenceError(f"Delete failed: {e}") from e

        return result.deleted_count
