"""
MongoDB persistence for exercise records.

The client module owns the connection; repositories own the queries.
"""

from .client import MockMongoStore, MongoConfig, MongoConnectionError, MongoStore, create_mongo_store

__all__ = [
    "MockMongoStore",
    "MongoConfig",
    "MongoConnectionError",
    "MongoStore",
    "create_mongo_store",
]
