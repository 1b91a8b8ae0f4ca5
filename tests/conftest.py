"""Pytest configuration and shared fixtures for vector-docstore tests."""

import os
from typing import Any, AsyncGenerator, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from vector_docstore.backends.client import RemoteVectorClient
from vector_docstore.backends.memory import InMemoryBackend
from vector_docstore.backends.remote import RemoteBackendAdapter
from vector_docstore.config.settings import Settings
from vector_docstore.core.store import DocumentStore


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an in-memory store, isolated from any .env file."""
    return Settings(
        _env_file=None,
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        VECTOR_STORE_PROVIDER="in-memory",
        VECTOR_STORE_NAMESPACE="default",
        VECTOR_STORE_DEFAULT_DIMENSION=384,
    )


@pytest.fixture
def remote_options() -> Dict[str, Any]:
    """Options for a remote backend pointing at a fake endpoint."""
    return {
        "url": "https://vector.example.test",
        "token": "test-token",
        "namespace": "default",
        "default_dimension": 4,
        "timeout_seconds": 5.0,
    }


@pytest.fixture
def sample_documents() -> List[Dict[str, Any]]:
    """Three documents: two orthogonal axes and their diagonal."""
    return [
        {"id": "1", "text": "Document A", "metadata": {"category": "x"}, "embedding": [1.0, 0.0]},
        {"id": "2", "text": "Document B", "metadata": {"category": "y"}, "embedding": [0.0, 1.0]},
        {"id": "3", "text": "Document C", "metadata": {"category": "x"}, "embedding": [1.0, 1.0]},
    ]


@pytest_asyncio.fixture
async def memory_backend() -> AsyncGenerator[InMemoryBackend, None]:
    """Initialized in-memory backend."""
    backend = InMemoryBackend()
    await backend.initialize()
    yield backend
    await backend.close()


@pytest_asyncio.fixture
async def memory_store() -> AsyncGenerator[DocumentStore, None]:
    """DocumentStore over the in-memory backend."""
    async with DocumentStore({"provider": "in-memory"}) as store:
        yield store


@pytest.fixture
def mock_client() -> AsyncMock:
    """Remote client double; every wire call is an AsyncMock."""
    client = AsyncMock(spec=RemoteVectorClient)
    client.upsert.return_value = None
    client.query.return_value = []
    client.update_by_id.return_value = 1
    client.delete_by_id.return_value = 1
    return client


@pytest.fixture
def remote_backend(remote_options: Dict[str, Any], mock_client: AsyncMock) -> RemoteBackendAdapter:
    """Remote backend wired to the mock client."""
    return RemoteBackendAdapter(remote_options, client=mock_client)


@pytest.fixture
def mock_aiohttp_session():
    """Create a mock aiohttp session returning a JSON envelope."""
    mock_session = MagicMock()
    mock_session.closed = False
    mock_session.close = AsyncMock()
    mock_response = MagicMock()
    mock_response.status = 200
    mock_response.json = AsyncMock(return_value={"result": "Success"})
    mock_response.text = AsyncMock(return_value="")
    mock_session.request.return_value.__aenter__ = AsyncMock(return_value=mock_response)
    mock_session.request.return_value.__aexit__ = AsyncMock(return_value=False)
    mock_session.response = mock_response
    return mock_session


# Environment cleanup
@pytest.fixture(autouse=True)
def cleanup_env():
    """Clean up environment variables before/after tests."""
    original_env = dict(os.environ)

    yield

    os.environ.clear()
    os.environ.update(original_env)
