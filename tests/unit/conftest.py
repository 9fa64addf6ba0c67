"""Shared fixtures for unit tests."""
from unittest.mock import AsyncMock

import pytest

from ragbot.config import Settings
from ragbot.rag.embedder import EmbeddingClient
from ragbot.rag.store_json import JSONVectorStore

from .helpers import RecordingSleep, completion_response


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_key="test-key",
        base_url="https://gemini.test/v1beta",
        vector_store_path=tmp_path / "store.json",
    )


@pytest.fixture
def llm_client():
    """Gemini client double with awaitable embed/generate methods."""
    client = AsyncMock()
    client.embed_content = AsyncMock()
    client.generate_content = AsyncMock(return_value=completion_response("answer"))
    return client


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def embedder(llm_client, sleep) -> EmbeddingClient:
    return EmbeddingClient(llm_client, max_attempts=5, base_delay=3.0, sleep=sleep)


@pytest.fixture
def store(tmp_path) -> JSONVectorStore:
    return JSONVectorStore(tmp_path / "store.json")
