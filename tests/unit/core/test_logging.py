"""Unit tests for restful/core/logging.py."""

import json
import logging
from collections.abc import Generator
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

import pytest
from pytest_mock import MockerFixture

from restful.core import logging as restful_logging
from restful.core.config import LogConfig, Settings
from restful.core.logging import (
    InterceptHandler,
    format_console_with_context,
    serialize_for_json,
    setup_logging,
)


def make_record(**extra: object) -> dict[str, Any]:
    """Build a minimal Loguru-like record."""
    return {
        "time": datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=UTC),
        "level": SimpleNamespace(name="INFO"),
        "message": "Request received",
        "name": "restful.api.pipeline",
        "function": "dispatch",
        "line": 42,
        "extra": extra,
        "exception": None,
    }


@pytest.fixture
def unconfigured_logging(mocker: MockerFixture) -> Generator[None]:
    """Reset the configured flag and keep Loguru's handlers untouched."""
    mocker.patch.object(restful_logging._state, "configured", False)
    mocker.patch("restful.core.logging.logger")
    mocker.patch("restful.core.logging.logging.basicConfig")
    yield
    for name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True


@pytest.mark.unit
class TestFormatters:
    """Test suite for the console and JSON formatters."""

    def test_console_shows_priority_fields_first(self) -> None:
        """Test request fields appear before other context."""
        record = make_record(
            component="restful",
            request_id="0123456789abcdef",
            method="GET",
            status_code=200,
        )

        formatted = format_console_with_context(record)

        assert formatted.index("01234567") < formatted.index("GET")
        assert "0123456789abcdef" not in formatted
        assert formatted.index("GET") < formatted.index("component=restful")
        assert "<green>200</green>" in formatted
        assert formatted.endswith("Request received\n")

    def test_console_escapes_braces(self) -> None:
        """Test braces in messages cannot break the format string."""
        record = make_record()
        record["message"] = "path /items/{uuid}"

        formatted = format_console_with_context(record)

        assert "/items/{{uuid}}" in formatted

    def test_console_truncates_long_values(self) -> None:
        """Test oversized extra values are shortened."""
        formatted = format_console_with_context(make_record(payload="x" * 500))

        assert "x" * 97 + "..." in formatted
        assert "x" * 98 not in formatted

    def test_json_includes_extra_fields(self) -> None:
        """Test JSON lines carry the bound context."""
        record = make_record(request_id="r1", status_code=201, _internal="hidden")

        entry = json.loads(serialize_for_json(record))

        assert entry["message"] == "Request received"
        assert entry["level"] == "INFO"
        assert entry["request_id"] == "r1"
        assert entry["status_code"] == 201
        assert "_internal" not in entry


@pytest.mark.unit
@pytest.mark.usefixtures("unconfigured_logging")
class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_console_formatter(self) -> None:
        """Test the console sink is installed for console settings."""
        settings = Settings(
            _env_file=None, log_config=LogConfig(log_formatter_type="console")
        )

        setup_logging(settings)

        restful_logging.logger.add.assert_called_once()
        kwargs = restful_logging.logger.add.call_args.kwargs
        assert kwargs["format"] is format_console_with_context
        assert restful_logging._state.configured is True

    def test_json_formatter(self) -> None:
        """Test a structured sink is installed for JSON settings."""
        settings = Settings(
            _env_file=None,
            log_config=LogConfig(log_formatter_type="json", log_level="WARNING"),
        )

        setup_logging(settings)

        args, kwargs = restful_logging.logger.add.call_args
        assert callable(args[0])
        assert kwargs["level"] == "WARNING"
        assert kwargs["diagnose"] is False

    def test_second_call_is_ignored(self) -> None:
        """Test logging is only configured once."""
        settings = Settings(_env_file=None)

        setup_logging(settings)
        setup_logging(settings)

        restful_logging.logger.add.assert_called_once()

    def test_uvicorn_loggers_are_intercepted(self) -> None:
        """Test uvicorn loggers forward to Loguru."""
        setup_logging(Settings(_env_file=None))

        uvicorn_logger = logging.getLogger("uvicorn.access")
        assert isinstance(uvicorn_logger.handlers[0], InterceptHandler)
        assert uvicorn_logger.propagate is False


@pytest.mark.unit
class TestInterceptHandler:
    """Test suite for InterceptHandler."""

    def test_forwards_standard_logging(self, log_records: list[dict[str, Any]]) -> None:
        """Test standard library records reach Loguru with their level."""
        std_logger = logging.getLogger("restful.test.intercept")
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(logging.INFO)

        std_logger.warning("disk %s low", "space")

        assert any(
            record["message"] == "disk space low"
            and record["level"].name == "WARNING"
            for record in log_records
        )
