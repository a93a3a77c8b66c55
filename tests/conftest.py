"""Pytest configuration and shared fixtures.

Fixtures:
    router_settings: Settings pointing at the fixture document/controllers
    write_document: Write a document dict to a YAML file in tmp_path
    mock_logger: MagicMock standing in for LoggerProtocol

Helpers:
    make_settings, minimal_document, make_request
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import yaml
from starlette.requests import Request

from src.core.config import Settings
from src.core.enums import Environment

FIXTURES_DIR = Path(__file__).parent / "fixtures"
PETSTORE_DOCUMENT = FIXTURES_DIR / "openapi" / "petstore.yaml"
CONTROLLERS_PACKAGE = "tests.fixtures.controllers"


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "api: End-to-end tests through the generated application"
    )


def make_settings(**overrides: Any) -> Settings:
    """Build Settings for the fixture document, ignoring the environment."""
    values: dict[str, Any] = {
        "environment": Environment.TESTING,
        "openapi_file_path": str(PETSTORE_DOCUMENT),
        "controllers_package": CONTROLLERS_PACKAGE,
        "api_base_url": "http://testserver",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def router_settings() -> Settings:
    """Settings serving tests/fixtures/openapi/petstore.yaml."""
    return make_settings()


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a document dict to ``tmp_path``.

    Usage:
        path = write_document({"openapi": "3.0.0", ...})
        path = write_document(schema_dict, name="schemas/item.yaml")
    """

    def _write(document: Any, name: str = "openapi.yaml") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double recording every call."""
    return MagicMock()


def minimal_document(paths: dict[str, Any], **extra: Any) -> dict[str, Any]:
    """Build a minimal valid OpenAPI 3 document around ``paths``."""
    document: dict[str, Any] = {
        "openapi": "3.0.0",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": paths,
    }
    document.update(extra)
    return document


def make_request(
    *,
    method: str = "GET",
    query_string: bytes = b"",
    path_params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    body: bytes = b"",
) -> Request:
    """Build a Starlette Request with an in-memory body."""
    scope = {
        "type": "http",
        "method": method,
        "path": "/",
        "query_string": query_string,
        "headers": [
            (name.lower().encode(), value.encode())
            for name, value in (headers or {}).items()
        ],
        "path_params": path_params or {},
    }
    messages = [{"type": "http.request", "body": body, "more_body": False}]

    async def receive():
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return Request(scope, receive)
