"""
Shared fixtures.

API tests run the real application factory in mock mode, so the whole
stack (routes, validation, repository) is exercised against the
in-memory store.
"""

import pytest
from fastapi.testclient import TestClient

from src.config.settings import Settings
from src.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongo_mock_mode=True,
        enforce_calendar_dates=True,
        _env_file=None,
    )


@pytest.fixture
def client(settings):
    """TestClient with the lifespan running (store opened and closed)."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pushups_body() -> dict:
    return {
        "name": "Pushups",
        "reps": 10,
        "weight": 1,
        "unit": "lbs",
        "date": "03-15-24",
    }
