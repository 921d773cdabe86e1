"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order
- Can create multiple app instances if needed (e.g., for testing)

For local development:
    uvicorn src.main:app --reload

Or, listening on the configured PORT:
    python -m src.main
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.error_handlers import register_error_handlers
from .api.routes import exercises, health
from .config.settings import Settings, get_settings
from .infrastructure.mongo.client import MongoConfig, create_mongo_store

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Opens the store once on startup and closes it on shutdown. Every
    request shares this one handle through the dependency layer.
    """
    settings: Settings = app.state.settings
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info(
        "Exercise Log API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": {"mongo": settings.mongo_mock_mode},
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    store = create_mongo_store(
        config=MongoConfig(
            connect_string=settings.mongodb_connect_string,
            database=settings.mongodb_database,
            collection=settings.mongodb_collection,
        ),
        mock_mode=settings.mongo_mock_mode,
    )

    # A failed ping isn't fatal: requests fail individually until the
    # server is reachable
    if await store.ping():
        logger.info("Successfully connected to MongoDB")

    app.state.store = store

    yield

    logger.info("Exercise Log API shutting down")
    await store.close()
    app.state.store = None


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Configuration to run with. Defaults to the cached
            environment settings; tests pass their own.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Log exercises: name, reps, weight, unit (kgs or lbs) and the date
        performed (MM-DD-YY).

        Invalid bodies are rejected with a generic 400 `{"Error": "Invalid Request"}`.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        exercises.router,
        prefix="/exercises",
        tags=["Exercises"],
    )

    register_error_handlers(app)

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    logger.info(f"Server listening on port {settings.port}...")
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
