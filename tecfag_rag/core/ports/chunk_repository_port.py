"""Chunk Repository Port Interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..domain import Chunk, DocumentRecord


class ChunkRepositoryPort(ABC):
    """Abstract interface for chunk and document persistence.

    Implementations must return chunks ordered by ``(document_id, chunk_index)``.
    """

    @abstractmethod
    async def create_many(self, chunks: Sequence[Chunk]) -> int:
        """Persist chunks, returning how many were written."""
        ...

    @abstractmethod
    async def delete_many(self, document_id: str) -> int:
        """Delete every chunk of a document, returning how many were removed."""
        ...

    @abstractmethod
    async def count(self, document_id: str) -> int:
        """Number of chunks stored for a document."""
        ...

    @abstractmethod
    async def find_many(
        self,
        document_id: str | None = None,
        catalog_id: str | None = None,
        document_ids: Sequence[str] | None = None,
        limit_per_document: int | None = None,
    ) -> list[Chunk]:
        """Fetch chunks matching all of the given filters."""
        ...

    @abstractmethod
    async def upsert_document(self, record: DocumentRecord) -> None:
        """Register or update a document."""
        ...

    @abstractmethod
    async def replace_document(self, record: DocumentRecord, chunks: Sequence[Chunk]) -> int:
        """Register a document and swap its chunks for ``chunks`` atomically.

        Returns how many previous chunks were removed.
        """
        ...

    @abstractmethod
    async def get_document(self, document_id: str) -> DocumentRecord | None:
        """Look up a single document."""
        ...

    @abstractmethod
    async def delete_document(self, document_id: str) -> None:
        """Remove a document and its chunks."""
        ...

    @abstractmethod
    async def find_documents(
        self,
        catalog_id: str | None = None,
        file_name_patterns: Sequence[str] | None = None,
    ) -> list[DocumentRecord]:
        """Documents in a catalog whose file name contains any of the patterns."""
        ...

    @abstractmethod
    async def chunk_counts(self, catalog_id: str | None = None) -> list[tuple[DocumentRecord, int]]:
        """Every document in a catalog with its chunk count."""
        ...
