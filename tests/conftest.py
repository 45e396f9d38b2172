"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable

import httpx
import pytest


def pytest_configure(config):
    """Set up test environment variables before tests run."""
    os.environ.setdefault("OLLAMA_BASE_URL", "http://ollama.test:11434")
    os.environ.setdefault("OLLAMA_MODEL", "llama3.2")
    os.environ.setdefault("LOG_LEVEL", "DEBUG")


@pytest.fixture
def mock_settings():
    """Provide mock settings for testing."""
    from autotex.config import Settings

    return Settings(
        ollama_base_url="http://ollama.test:11434",
        ollama_model="llama3.2",
        ollama_health_timeout=1.0,
    )


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests seen by the mock transport."""
    return []


@pytest.fixture
def make_client(mock_settings, recorded_requests):
    """Build an OllamaClient whose HTTP calls are answered by ``handler``."""
    from autotex.ui.api_client import OllamaClient

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> OllamaClient:
        def record(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return OllamaClient(config=mock_settings, transport=httpx.MockTransport(record))

    return factory

