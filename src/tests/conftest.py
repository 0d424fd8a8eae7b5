"""Pytest configuration and fixtures for Traffic Ops API tests."""

from collections.abc import Callable, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.core.database import get_session_factory


@pytest.fixture
def app() -> FastAPI:
    """Create a fresh application instance (lifespan is not started)."""
    from src.main import create_app

    return create_app()


@pytest.fixture
def client_for(app: FastAPI) -> Iterator[Callable[[object], TestClient]]:
    """Build a TestClient whose requests open sessions from ``factory``.

    Usage:
        client = client_for(lambda: scripted_session)
    """

    def build(factory: object) -> TestClient:
        app.dependency_overrides[get_session_factory] = lambda: factory
        return TestClient(app, raise_server_exceptions=False)

    yield build
    app.dependency_overrides.clear()
