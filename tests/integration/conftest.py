"""Shared fixtures for integration tests."""

import pytest
from fastapi.testclient import TestClient

from restful.api.service import Service
from restful.core.config import Settings
from restful.demo import create_service


@pytest.fixture
def demo_service(monkeypatch: pytest.MonkeyPatch) -> Service:
    """Provide the demo service with default test settings."""
    monkeypatch.setenv("ENVIRONMENT", "development")
    return create_service(Settings(_env_file=None))


@pytest.fixture
def client(demo_service: Service) -> TestClient:
    """Provide a client for the demo service."""
    return TestClient(demo_service.app)
