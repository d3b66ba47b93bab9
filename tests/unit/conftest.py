"""Shared fixtures for unit tests."""

from collections.abc import Awaitable, Callable
from typing import Any, cast

import pytest
from pytest_mock import MockerFixture, MockType
from starlette.requests import Request

from restful.api.service import Service
from restful.core.config import Settings

type RequestFactory = Callable[..., Request]


@pytest.fixture
def test_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide Settings built from test environment variables.

    Returns:
        Settings: Settings with test defaults.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.delenv("PORT", raising=False)
    return Settings()


@pytest.fixture
def mock_log(mocker: MockerFixture) -> MockType:
    """Provide a mock logger for injection into services and pipelines.

    Returns:
        MockType: MagicMock standing in for a Loguru logger.
    """
    return cast("MockType", mocker.MagicMock(name="log"))


@pytest.fixture
def service(test_settings: Settings, mock_log: MockType) -> Service:
    """Provide a service with a dict context and a mock logger."""
    return Service(context={"name": "shared"}, settings=test_settings, log=mock_log)


def _receive_factory(body: bytes) -> Callable[[], Awaitable[dict[str, Any]]]:
    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": body, "more_body": False}

    return receive


@pytest.fixture
def make_http_request() -> RequestFactory:
    """Provide a factory for Starlette requests built from a raw ASGI scope.

    Returns:
        RequestFactory: Callable taking method, path, path_params and body.
    """

    def factory(
        method: str = "GET",
        path: str = "/",
        path_params: dict[str, Any] | None = None,
        body: bytes = b"",
    ) -> Request:
        scope = {
            "type": "http",
            "method": method,
            "path": path,
            "root_path": "",
            "scheme": "http",
            "server": ("testserver", 80),
            "query_string": b"",
            "headers": [],
            "path_params": path_params or {},
        }
        return Request(scope, _receive_factory(body))

    return factory
