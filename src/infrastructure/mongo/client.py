"""
MongoDB connection management.

Provides the store handle the application holds for its whole lifetime:
one client, one collection. Includes mock mode with in-memory storage for
local development and tests.

Using the repository pattern means most code never touches this module
directly - it goes through ExerciseRepository which handles the translation
between domain models and documents.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Optional

import bson
from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

logger = logging.getLogger(__name__)


class MongoConnectionError(Exception):
    """Raised when the MongoDB client can't be created."""
    pass


@dataclass
class MongoConfig:
    """Configuration for the MongoDB connection."""
    connect_string: str
    database: str = "exercise_log"
    collection: str = "exercises"


class MongoStore:
    """
    Handle on the exercises collection backed by a real MongoDB server.

    The client keeps its own connection pool, so a single instance is
    created at startup and shared by every request.
    """

    mock_mode = False

    def __init__(self, client: AsyncMongoClient, config: MongoConfig) -> None:
        self._client = client
        self._config = config
        self.collection = client[config.database][config.collection]

    async def ping(self) -> bool:
        """Round trip to the server (for startup logging and readiness)."""
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(
                "MongoDB ping failed",
                extra={"error": str(e), "database": self._config.database}
            )
            return False

    async def close(self) -> None:
        await self._client.close()
        logger.debug("Closed MongoDB client")


def get_mongo_store(config: MongoConfig) -> MongoStore:
    """
    Create a store backed by PyMongo's asyncio client.

    The client connects lazily; the first operation (or ping) opens the
    connection. Errors in the connection string surface here.
    """
    try:
        client = AsyncMongoClient(config.connect_string)
    except (PyMongoError, ValueError) as e:
        logger.error(
            "Could not create MongoDB client",
            extra={"error": str(e)}
        )
        raise MongoConnectionError(f"Connection error: {e}")

    logger.debug(
        "Created MongoDB client",
        extra={"database": config.database, "collection": config.collection}
    )
    return MongoStore(client, config)


# ---------------------------------------------------------------------------
# Mock Store for Local Development
# ---------------------------------------------------------------------------

class MockCursor:
    """Result of MockCollection.find, drained with to_list like the real cursor."""

    def __init__(self, documents: list[dict]) -> None:
        self._documents = documents

    async def to_list(self, length: Optional[int] = None) -> list[dict]:
        if length is None:
            return list(self._documents)
        return self._documents[:length]


class MockCollection:
    """
    In-memory stand-in for an async PyMongo collection.

    Implements just enough of the collection interface to support
    ExerciseRepository: insert_one, find, find_one, replace_one and
    delete_one. Ids are real ObjectIds and results are PyMongo's own
    result types, so the repository can't tell the difference.

    Documents are BSON-encoded on write, so values the real driver refuses
    (ints wider than 8 bytes) fail here too. They are copied on the way in
    and out so callers can't mutate stored state.
    """

    def __init__(self) -> None:
        # {ObjectId: document}, insertion ordered like a natural-order scan
        self._documents: dict[ObjectId, dict] = {}

    @staticmethod
    def _matches(document: dict, filter: Optional[dict]) -> bool:
        if not filter:
            return True
        return all(document.get(key) == value for key, value in filter.items())

    async def insert_one(self, document: dict) -> InsertOneResult:
        bson.encode(document)
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        self._documents[stored["_id"]] = stored
        # PyMongo sets _id on the caller's document too
        document["_id"] = stored["_id"]
        return InsertOneResult(stored["_id"], True)

    def find(self, filter: Optional[dict] = None) -> MockCursor:
        matches = [
            copy.deepcopy(doc)
            for doc in self._documents.values()
            if self._matches(doc, filter)
        ]
        return MockCursor(matches)

    async def find_one(self, filter: Optional[dict] = None) -> Optional[dict]:
        for doc in self._documents.values():
            if self._matches(doc, filter):
                return copy.deepcopy(doc)
        return None

    async def replace_one(self, filter: dict, replacement: dict) -> UpdateResult:
        bson.encode(replacement)
        for doc_id, doc in self._documents.items():
            if self._matches(doc, filter):
                updated = {"_id": doc_id, **copy.deepcopy(replacement)}
                modified = 1 if updated != doc else 0
                self._documents[doc_id] = updated
                return UpdateResult({"n": 1, "nModified": modified, "ok": 1.0}, True)
        return UpdateResult({"n": 0, "nModified": 0, "ok": 1.0}, True)

    async def delete_one(self, filter: dict) -> DeleteResult:
        for doc_id, doc in self._documents.items():
            if self._matches(doc, filter):
                del self._documents[doc_id]
                return DeleteResult({"n": 1, "ok": 1.0}, True)
        return DeleteResult({"n": 0, "ok": 1.0}, True)

    # Helper methods for testing
    def _count(self) -> int:
        return len(self._documents)

    def _get(self, document_id: Any) -> Optional[dict]:
        return self._documents.get(ObjectId(str(document_id)))

    def _clear(self) -> None:
        self._documents.clear()


class MockMongoStore:
    """
    Mock store for local development.

    Not suitable for production, but perfect for:
    - Local development without a MongoDB server
    - Unit and API tests
    - CI/CD environments
    """

    mock_mode = True

    def __init__(self) -> None:
        self.collection = MockCollection()
        logger.info("Initialized mock MongoDB store (in-memory)")

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        logger.debug("Mock store close")


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_mongo_store(
    config: Optional[MongoConfig] = None,
    mock_mode: bool = False,
):
    """
    Create the store handle based on configuration.

    Args:
        config: MongoDB configuration (required if not mock_mode)
        mock_mode: If True, return an in-memory store

    Returns:
        MongoStore or MockMongoStore
    """
    if mock_mode:
        return MockMongoStore()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return get_mongo_store(config)
