"""Root conftest.py for the restful test suite.

This file contains project-wide fixtures and pytest configuration.
"""

from collections.abc import Generator
from typing import Any

import pytest
from loguru import logger

from restful.core.config import get_settings


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]]]:
    """Capture Loguru records emitted during a test.

    Yields:
        list[dict[str, Any]]: Records in emission order.
    """
    records: list[dict[str, Any]] = []
    handler_id = logger.add(
        lambda message: records.append(message.record), level="DEBUG"
    )
    yield records
    logger.remove(handler_id)
