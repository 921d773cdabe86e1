"""
Unit tests for ExerciseRepository against the in-memory store.

The mock collection returns PyMongo's own result objects and BSON-encodes
every write, so these tests exercise the same code paths a real MongoDB
would.
"""

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from src.core.exercises.models import ExerciseFields, ExerciseRecord, WeightUnit
from src.infrastructure.mongo.client import MockCollection
from src.infrastructure.mongo.repositories.exercises import (
    ExerciseNotFoundError,
    ExercisePersistenceError,
    ExerciseRepository,
    InvalidExerciseIdError,
)

# Wider than any integer BSON can store
TOO_WIDE_FOR_BSON = 2**64


@pytest.fixture
def collection() -> MockCollection:
    return MockCollection()


@pytest.fixture
def repository(collection) -> ExerciseRepository:
    return ExerciseRepository(collection)


@pytest.fixture
def pushups() -> ExerciseFields:
    return ExerciseFields(
        name="Pushups", reps=10, weight=1, unit=WeightUnit.LBS, date="03-15-24"
    )


@pytest.fixture
def squats() -> ExerciseFields:
    return ExerciseFields(
        name="Squats", reps=5, weight=100, unit=WeightUnit.KGS, date="03-16-24"
    )


def _failing(error: Exception):
    """A collection method that always raises the given driver error."""
    def method(*args, **kwargs):
        raise error
    return method


# ---------------------------------------------------------------------------
# Create / Read
# ---------------------------------------------------------------------------

class TestCreateAndFind:
    """Inserting records and reading them back."""

    @pytest.mark.asyncio
    async def test_create_assigns_object_id(self, repository, collection, pushups):
        """The store generates the id; the unit is stored as its string value."""
        record = await repository.create_exercise(pushups)

        assert ObjectId.is_valid(record.id)
        assert record.fields == pushups
        assert collection._get(record.id)["unit"] == "lbs"

    @pytest.mark.asyncio
    async def test_round_trip_by_id(self, repository, pushups):
        """Fetching by the returned id yields the created record."""
        created = await repository.create_exercise(pushups)

        fetched = await repository.find_exercise_by_id(created.id)

        assert fetched == created

    @pytest.mark.asyncio
    async def test_find_exercises_on_empty_collection(self, repository):
        """An empty collection is an empty list, not an error."""
        assert await repository.find_exercises() == []

    @pytest.mark.asyncio
    async def test_find_exercises_returns_all_in_insertion_order(self, repository, pushups, squats):
        """Without a filter, every record comes back in stored order."""
        first = await repository.create_exercise(pushups)
        second = await repository.create_exercise(squats)

        assert await repository.find_exercises() == [first, second]

    @pytest.mark.asyncio
    async def test_find_exercises_honours_filter(self, repository, pushups, squats):
        """A filter narrows the listing by field equality."""
        await repository.create_exercise(pushups)
        squat_record = await repository.create_exercise(squats)

        assert await repository.find_exercises({"unit": "kgs"}) == [squat_record]

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_found(self, repository):
        """A well-formed id with no record raises ExerciseNotFoundError."""
        with pytest.raises(ExerciseNotFoundError):
            await repository.find_exercise_by_id(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_malformed_id_is_distinct_from_not_found(self, repository):
        """An id that can't be an ObjectId fails before the round trip."""
        with pytest.raises(InvalidExerciseIdError):
            await repository.find_exercise_by_id("not-an-id")

    def test_invalid_id_is_a_persistence_error(self):
        """Routes catching persistence errors also catch malformed ids."""
        assert issubclass(InvalidExerciseIdError, ExercisePersistenceError)


# ---------------------------------------------------------------------------
# Replace
# ---------------------------------------------------------------------------

class TestReplace:
    """Whole-document replacement."""

    @pytest.mark.asyncio
    async def test_replace_overwrites_every_field(self, repository, pushups, squats):
        """All five fields change together; the id stays."""
        created = await repository.create_exercise(pushups)

        matched = await repository.replace_exercise(created.id, squats)

        assert matched == 1
        assert await repository.find_exercise_by_id(created.id) == ExerciseRecord.from_fields(
            created.id, squats
        )

    @pytest.mark.asyncio
    async def test_replace_with_identical_values_still_matches(self, repository, pushups):
        """The matched count is reported, so a no-op replace still counts."""
        created = await repository.create_exercise(pushups)

        assert await repository.replace_exercise(created.id, pushups) == 1

    @pytest.mark.asyncio
    async def test_replace_unknown_id_returns_zero(self, repository, pushups):
        """No record with this id means nothing matched."""
        assert await repository.replace_exercise(str(ObjectId()), pushups) == 0

    @pytest.mark.asyncio
    async def test_replace_drops_fields_not_in_replacement(self, repository, collection, pushups, squats):
        """Whole-document replacement, not a merge."""
        created = await repository.create_exercise(pushups)
        collection._documents[ObjectId(created.id)]["notes"] = "legacy field"

        await repository.replace_exercise(created.id, squats)

        assert "notes" not in collection._get(created.id)

    @pytest.mark.asyncio
    async def test_replace_malformed_id(self, repository, pushups):
        """Malformed ids are rejected before the round trip."""
        with pytest.raises(InvalidExerciseIdError):
            await repository.replace_exercise("123", pushups)


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

class TestDelete:
    """Permanent removal by id."""

    @pytest.mark.asyncio
    async def test_delete_twice_reports_one_then_zero(self, repository, collection, pushups):
        """The second delete finds nothing left to remove."""
        created = await repository.create_exercise(pushups)

        assert await repository.delete_exercise(created.id) == 1
        assert await repository.delete_exercise(created.id) == 0
        assert collection._count() == 0

    @pytest.mark.asyncio
    async def test_delete_only_removes_target(self, repository, pushups, squats):
        """Other records survive a delete."""
        first = await repository.create_exercise(pushups)
        second = await repository.create_exercise(squats)

        await repository.delete_exercise(first.id)

        assert await repository.find_exercises() == [second]

    @pytest.mark.asyncio
    async def test_delete_malformed_id(self, repository):
        """Malformed ids are rejected before the round trip."""
        with pytest.raises(InvalidExerciseIdError):
            await repository.delete_exercise("zzzz")


# ---------------------------------------------------------------------------
# Driver Failures
# ---------------------------------------------------------------------------

class TestDriverFailures:
    """Every PyMongo error is wrapped, never leaked."""

    @pytest.mark.asyncio
    async def test_create_failure(self, repository, collection, pushups, monkeypatch):
        """insert_one failing surfaces as ExercisePersistenceError."""
        monkeypatch.setattr(collection, "insert_one", _failing(ServerSelectionTimeoutError("down")))

        with pytest.raises(ExercisePersistenceError, match="down"):
            await repository.create_exercise(pushups)

    @pytest.mark.asyncio
    async def test_list_failure(self, repository, collection, monkeypatch):
        """find failing surfaces as ExercisePersistenceError."""
        monkeypatch.setattr(collection, "find", _failing(ServerSelectionTimeoutError("down")))

        with pytest.raises(ExercisePersistenceError):
            await repository.find_exercises()

    @pytest.mark.asyncio
    async def test_lookup_failure(self, repository, collection, monkeypatch):
        """find_one failing surfaces as ExercisePersistenceError."""
        monkeypatch.setattr(collection, "find_one", _failing(ServerSelectionTimeoutError("down")))

        with pytest.raises(ExercisePersistenceError):
            await repository.find_exercise_by_id(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_replace_failure(self, repository, collection, pushups, monkeypatch):
        """replace_one failing surfaces as ExercisePersistenceError."""
        created = await repository.create_exercise(pushups)
        monkeypatch.setattr(collection, "replace_one", _failing(ServerSelectionTimeoutError("down")))

        with pytest.raises(ExercisePersistenceError, match="down"):
            await repository.replace_exercise(created.id, pushups)

    @pytest.mark.asyncio
    async def test_delete_failure(self, repository, collection, monkeypatch):
        """delete_one failing surfaces as ExercisePersistenceError."""
        monkeypatch.setattr(collection, "delete_one", _failing(ServerSelectionTimeoutError("down")))

        with pytest.raises(ExercisePersistenceError):
            await repository.delete_exercise(str(ObjectId()))


class TestEncodingFailures:
    """
    Values BSON can't encode fail before the driver sends anything.

    These errors aren't PyMongoError subclasses, so the repository wraps
    them explicitly.
    """

    @pytest.mark.asyncio
    async def test_mock_collection_encodes_like_the_driver(self, collection):
        """Integers wider than 8 bytes are refused on insert."""
        with pytest.raises(OverflowError):
            await collection.insert_one({"reps": TOO_WIDE_FOR_BSON})

        assert collection._count() == 0

    @pytest.mark.asyncio
    async def test_create_with_oversized_int_is_persistence_error(self, repository, collection, pushups):
        """An unencodable create is wrapped and nothing is stored."""
        oversized = ExerciseFields(
            name="Pushups", reps=TOO_WIDE_FOR_BSON, weight=1, unit=WeightUnit.LBS, date="03-15-24"
        )

        with pytest.raises(ExercisePersistenceError):
            await repository.create_exercise(oversized)

        assert collection._count() == 0

    @pytest.mark.asyncio
    async def test_replace_with_oversized_int_is_persistence_error(self, repository, pushups):
        """An unencodable replace is wrapped and the record is untouched."""
        created = await repository.create_exercise(pushups)
        oversized = ExerciseFields(
            name="Pushups", reps=10, weight=TOO_WIDE_FOR_BSON, unit=WeightUnit.LBS, date="03-15-24"
        )

        with pytest.raises(ExercisePersistenceError):
            await repository.replace_exercise(created.id, oversized)

        assert await repository.find_exercise_by_id(created.id) == created
