"""
Pytest configuration and shared fixtures.
"""

import asyncio
import os

import pytest

from tecfag_rag.adapters.outbound.sqlite_chunk_repository import SQLiteChunkRepository
from tecfag_rag.core.domain import Chunk, ChunkMetadata, VectorSearchResult
from tecfag_rag.core.domain.exceptions import EmbeddingAPIError
from tecfag_rag.core.ports import EmbeddingPort


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (require API keys)")


class FakeEmbedder(EmbeddingPort):
    """Deterministic embedder for tests.

    Texts listed in ``vectors`` get that vector, everything else gets
    ``default``. Texts in ``failing`` raise ``EmbeddingAPIError`` and texts in
    ``slow`` sleep for ``delay`` seconds first.
    """

    def __init__(self, vectors=None, default=None, failing=(), slow=(), delay=1.0):
        self.vectors = dict(vectors or {})
        self.default = default or [1.0, 0.0, 0.0]
        self.failing = set(failing)
        self.slow = set(slow)
        self.delay = delay
        self.calls = []

    async def embed(self, text):
        self.calls.append(text)
        if text in self.slow:
            await asyncio.sleep(self.delay)
        if text in self.failing:
            raise EmbeddingAPIError(f"Embedding failed for {text!r}")
        return list(self.vectors.get(text, self.default))

    async def embed_batch(self, texts):
        return [await self.embed(text) for text in texts]


@pytest.fixture(scope="session")
def gemini_api_key():
    """Gemini API key for integration tests."""
    key = os.environ.get("GEMINI_API_KEY")
    if not key:
        pytest.skip("GEMINI_API_KEY not set")
    return key


@pytest.fixture
def repository(tmp_path):
    """Empty SQLite chunk repository in a temporary directory."""
    return SQLiteChunkRepository(tmp_path / "test.db")


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def make_chunk():
    """Factory for stored chunks."""

    def _make(document_id, chunk_index, embedding, content=None, file_name=None, chunk_id=None):
        return Chunk(
            id=chunk_id or f"{document_id}-{chunk_index}",
            document_id=document_id,
            content=content or f"{document_id} chunk {chunk_index}",
            chunk_index=chunk_index,
            embedding=list(embedding),
            metadata=ChunkMetadata(file_name=file_name),
        )

    return _make


@pytest.fixture
def make_result():
    """Factory for search results."""

    def _make(chunk_id, document_id="doc-a", chunk_index=0, similarity=0.5, content=None, file_name=None):
        return VectorSearchResult(
            id=chunk_id,
            document_id=document_id,
            content=content or f"content of {chunk_id}",
            chunk_index=chunk_index,
            similarity=similarity,
            metadata=ChunkMetadata(file_name=file_name),
        )

    return _make


@pytest.fixture
def seed_documents(repository, make_chunk):
    """Coroutine that registers documents and stores their chunks.

    ``documents`` is a list of ``(DocumentRecord, embeddings)`` pairs, with
    one embedding per chunk in chunk order.
    """

    async def _seed(documents):
        for record, embeddings in documents:
            await repository.upsert_document(record)
            await repository.create_many(
                [
                    make_chunk(record.id, index, embedding, file_name=record.file_name)
                    for index, embedding in enumerate(embeddings)
                ]
            )

    return _seed

