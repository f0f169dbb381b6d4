"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - chat_settings: Deterministic backend settings
    - mock_ollama: Scriptable Ollama backend behind an httpx.MockTransport
    - chat_client: OllamaChatClient wired to the mock backend
    - async_client: HTTPX client for API testing

Implements async fixtures with proper cleanup.
"""

from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from assistant_chat.api import app
from assistant_chat.backend.client import OllamaChatClient
from assistant_chat.backend.config import ChatSettings
from tests.support import MockOllama


@pytest.fixture
def chat_settings() -> ChatSettings:
    """Return settings pointing at a fake local Ollama host."""
    return ChatSettings(
        ollama_host="http://ollama.test",
        model_name="test-model",
        temperature=0.7,
        request_timeout=5.0,
    )


@pytest.fixture
def mock_ollama() -> MockOllama:
    """Return a mock backend that answers with an empty successful stream."""
    return MockOllama()


@pytest.fixture
async def mock_http(mock_ollama: MockOllama) -> AsyncGenerator[httpx.AsyncClient]:
    """Create an async HTTP client routed to the mock backend.

    Yields:
        AsyncClient whose requests are answered by ``mock_ollama``.
    """
    transport = httpx.MockTransport(mock_ollama.handler)
    async with httpx.AsyncClient(transport=transport) as client:
        yield client


@pytest.fixture
def chat_client(chat_settings: ChatSettings, mock_http: httpx.AsyncClient) -> OllamaChatClient:
    """Return a chat client service backed by the mock transport."""
    return OllamaChatClient(settings=chat_settings, client=mock_http)


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
