"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock mode enables local development without a MongoDB server.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Exercise Log API"
    api_version: str = "v1"
    port: int = Field(
        default=3000,
        description="Port the HTTP server listens on"
    )

    # MongoDB Configuration
    mongodb_connect_string: str = Field(
        default="",
        description="MongoDB connection string. Required unless in mock mode."
    )
    mongodb_database: str = Field(
        default="exercise_log",
        description="Database holding the exercises collection"
    )
    mongodb_collection: str = Field(
        default="exercises",
        description="Collection storing one document per exercise record"
    )
    mongo_mock_mode: bool = Field(
        default=False,
        description="Use in-memory store instead of MongoDB. Enables local dev without a database."
    )

    # Validation Behavior
    enforce_calendar_dates: bool = Field(
        default=True,
        description="Reject dates that don't exist (02-30-24). False only logs them."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode.

        Returns list of missing required fields.
        """
        missing = []

        if not self.mongo_mock_mode and not self.mongodb_connect_string:
            missing.append("MONGODB_CONNECT_STRING")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, call get_settings.cache_clear() or pass Settings to create_app.
    """
    return Settings()
