"""Vector Store Port Interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..domain import DocumentStats, VectorSearchResult


class VectorStorePort(ABC):
    """Abstract interface for chunk retrieval."""

    @abstractmethod
    async def search(
        self,
        query_embedding: Sequence[float],
        top_k: int = 5,
        document_id: str | None = None,
        catalog_id: str | None = None,
    ) -> list[VectorSearchResult]:
        """Return the ``top_k`` chunks most similar to the query vector."""
        ...

    @abstractmethod
    async def search_by_document(
        self,
        catalog_id: str | None = None,
        chunks_per_document: int = 2,
    ) -> list[VectorSearchResult]:
        """Return the first chunks of every document."""
        ...

    @abstractmethod
    async def get_full_document_chunks(
        self,
        document_patterns: Sequence[str],
        catalog_id: str | None = None,
    ) -> list[VectorSearchResult]:
        """Return every chunk of the documents whose file name matches a pattern."""
        ...

    @abstractmethod
    async def get_document_stats(self, catalog_id: str | None = None) -> DocumentStats:
        """Aggregate document and chunk counts."""
        ...
