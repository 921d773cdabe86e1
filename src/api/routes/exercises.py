"""
Exercise log API endpoints.

Five endpoints, one per store operation:
- POST   /exercises       create a record
- GET    /exercises       list every record
- GET    /exercises/{id}  fetch one record
- PUT    /exercises/{id}  replace all fields of a record
- DELETE /exercises/{id}  delete a record

Bodies are validated by the core validation chain rather than by a
Pydantic request model, so every invalid body gets the same generic 400
instead of FastAPI's field-level 422.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field

from ...config.settings import Settings
from ...core.exercises.models import ExerciseFields, ExerciseRecord
from ...core.exercises.validation import ExerciseValidationError, require_valid_exercise
from ...infrastructure.mongo.repositories.exercises import (
    ExerciseNotFoundError,
    ExercisePersistenceError,
)
from ..dependencies import ExerciseRepositoryDep, SettingsDep
from ..error_handlers import INVALID_REQUEST, NOT_FOUND, REQUEST_FAILED

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------

class ExerciseResponse(BaseModel):
    """A stored exercise record."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", description="Record identifier")
    name: str = Field(description="Exercise name")
    reps: int = Field(description="Repetitions performed")
    weight: int = Field(description="Weight lifted")
    unit: str = Field(description="Weight unit (kgs or lbs)")
    date: str = Field(description="Date performed (MM-DD-YY)")

    @classmethod
    def from_record(cls, record: ExerciseRecord) -> "ExerciseResponse":
        return cls(
            id=record.id,
            name=record.name,
            reps=record.reps,
            weight=record.weight,
            unit=record.unit.value,
            date=record.date,
        )


def _parse_body(body: Any, settings: Settings) -> ExerciseFields:
    try:
        return require_valid_exercise(body, enforce_calendar=settings.enforce_calendar_dates)
    except ExerciseValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_REQUEST,
        )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ExerciseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log an exercise",
)
async def create_exercise(
    repository: ExerciseRepositoryDep,
    settings: SettingsDep,
    body: Any = Body(None),
) -> ExerciseResponse:
    """Validate the body and store a new record."""
    fields = _parse_body(body, settings)

    try:
        record = await repository.create_exercise(fields)
    except ExercisePersistenceError as e:
        logger.error("Create request failed", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_REQUEST,
        )

    return ExerciseResponse.from_record(record)


@router.get(
    "",
    response_model=list[ExerciseResponse],
    status_code=status.HTTP_200_OK,
    summary="List exercises",
)
async def list_exercises(repository: ExerciseRepositoryDep) -> list[ExerciseResponse]:
    """Every record in the collection. An empty log is an empty array."""
    try:
        records = await repository.find_exercises()
    except ExercisePersistenceError as e:
        logger.error("List request failed", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=REQUEST_FAILED,
        )

    return [ExerciseResponse.from_record(record) for record in records]


@router.get(
    "/{exercise_id}",
    response_model=ExerciseResponse,
    status_code=status.HTTP_200_OK,
    summary="Get an exercise",
)
async def get_exercise(
    exercise_id: str,
    repository: ExerciseRepositoryDep,
) -> ExerciseResponse:
    """
    Fetch one record.

    Unknown ids, malformed ids and store failures all answer 404.
    """
    try:
        record = await repository.find_exercise_by_id(exercise_id)
    except ExerciseNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    except ExercisePersistenceError as e:
        logger.error(
            "Get request failed",
            extra={"exercise_id": exercise_id, "error": str(e)}
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    return ExerciseResponse.from_record(record)


@router.put(
    "/{exercise_id}",
    response_model=ExerciseResponse,
    status_code=status.HTTP_200_OK,
    summary="Replace an exercise",
)
async def replace_exercise(
    exercise_id: str,
    repository: ExerciseRepositoryDep,
    settings: SettingsDep,
    body: Any = Body(None),
) -> ExerciseResponse:
    """
    Overwrite every field of a record and echo the result.

    A body that fails validation is rejected before the store is touched.
    The echo has the same shape as every other record response, with the
    identifier under "_id" (not "id").
    """
    fields = _parse_body(body, settings)

    try:
        matched = await repository.replace_exercise(exercise_id, fields)
    except ExercisePersistenceError as e:
        logger.error(
            "Replace request failed",
            extra={"exercise_id": exercise_id, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_REQUEST,
        )

    if matched != 1:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    return ExerciseResponse.from_record(ExerciseRecord.from_fields(exercise_id, fields))


@router.delete(
    "/{exercise_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an exercise",
)
async def delete_exercise(
    exercise_id: str,
    repository: ExerciseRepositoryDep,
) -> Response:
    """Remove a record permanently."""
    try:
        deleted = await repository.delete_exercise(exercise_id)
    except ExercisePersistenceError as e:
        logger.error(
            "Delete request failed",
            extra={"exercise_id": exercise_id, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_REQUEST,
        )

    if deleted != 1:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
