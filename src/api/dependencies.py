"""
FastAPI dependency injection.

Dependencies provide the store, repository, and configuration to route
handlers. Using dependency injection means:
- Routes don't reach for global state (easier to test)
- Dependencies can be overridden with test doubles
- The store handle is created once in the lifespan and passed in here

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..infrastructure.mongo.repositories.exercises import ExerciseRepository

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_store(request: Request):
    """
    Provide the process-wide store handle.

    The lifespan opens it on startup; requests arriving before that (or
    after shutdown) are a programming error, not a client error.
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Store not initialized")
    return store


def get_exercise_repository(
    store: Annotated[object, Depends(get_store)],
) -> ExerciseRepository:
    """
    Provide ExerciseRepository bound to the shared collection.

    The repository is stateless, so a new one per request is free; the
    connection pool lives in the store client.
    """
    return ExerciseRepository(store.collection)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
StoreDep = Annotated[object, Depends(get_store)]
ExerciseRepositoryDep = Annotated[ExerciseRepository, Depends(get_exercise_repository)]
