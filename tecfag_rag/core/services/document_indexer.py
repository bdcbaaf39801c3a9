"""Document ingestion: chunk, embed and store extracted text."""

import hashlib
import logging
from dataclasses import dataclass
from typing import Any

from ..domain import Chunk, ChunkMetadata, DocumentRecord
from ..domain.exceptions import DocumentNotFoundError, ValidationError
from ..domain.utils import chunk_text, estimate_tokens, normalize_text
from ..ports import ChunkRepositoryPort, EmbeddingPort

logger = logging.getLogger(__name__)


@dataclass
class IndexingReport:
    """Outcome of indexing one document."""

    document_id: str
    chunk_count: int
    total_tokens: int


def _chunk_id(document_id: str, chunk_index: int, content: str) -> str:
    digest = hashlib.sha256(f"{document_id}:{chunk_index}:{content}".encode()).hexdigest()
    return digest[:32]


class DocumentIndexer:
    """Turns a document's text into stored, embedded chunks."""

    def __init__(
        self,
        repository: ChunkRepositoryPort,
        embedder: EmbeddingPort,
        chunk_size: int = 800,
        chunk_overlap: int = 150,
        strategy: str = "semantic",
    ) -> None:
        self.repository = repository
        self.embedder = embedder
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.strategy = strategy

    async def index_document(
        self,
        record: DocumentRecord,
        text: str,
        extra_metadata: dict[str, Any] | None = None,
    ) -> IndexingReport:
        """Chunk, embed and store ``text`` as the content of ``record``.

        Existing chunks of the document are replaced.

        Raises:
            ValidationError: If the text is empty after cleaning.
            EmbeddingError: If the embedding provider fails.
            ChunkStoreError: If the chunks cannot be written.
        """
        cleaned = normalize_text(text)
        if not cleaned:
            raise ValidationError(
                "No text extracted from document",
                context={"document_id": record.id, "file_name": record.file_name},
            )

        pieces = chunk_text(cleaned, self.chunk_size, self.chunk_overlap, self.strategy)
        logger.info(f"Chunked {record.file_name} ({len(cleaned)} characters) into {len(pieces)} chunks")

        embeddings = await self.embedder.embed_batch(pieces)

        metadata = ChunkMetadata(
            file_name=record.file_name,
            file_type=record.file_type,
            catalog_id=record.catalog_id,
            extra=dict(extra_metadata or {}),
        )
        chunks = [
            Chunk(
                id=_chunk_id(record.id, index, content),
                document_id=record.id,
                content=content,
                chunk_index=index,
                embedding=embedding,
                metadata=metadata,
            )
            for index, (content, embedding) in enumerate(zip(pieces, embeddings, strict=True))
        ]

        removed = await self.repository.replace_document(record, chunks)
        if removed:
            logger.info(f"Replaced {removed} previous chunks of {record.id}")

        report = IndexingReport(
            document_id=record.id,
            chunk_count=len(chunks),
            total_tokens=sum(estimate_tokens(piece) for piece in pieces),
        )
        logger.info(
            f"Indexed document {record.id}: {report.chunk_count} chunks, {report.total_tokens} tokens"
        )
        return report

    async def reindex_document(
        self,
        document_id: str,
        text: str,
        extra_metadata: dict[str, Any] | None = None,
    ) -> IndexingReport:
        """Drop a registered document's chunks and index ``text`` again."""
        record = await self.repository.get_document(document_id)
        if record is None:
            raise DocumentNotFoundError(f"Document not found: {document_id}", context={"document_id": document_id})

        logger.info(f"Reindexing document: {document_id}")
        return await self.index_document(record, text, extra_metadata)

    async def delete_document(self, document_id: str) -> None:
        record = await self.repository.get_document(document_id)
        if record is None:
            raise DocumentNotFoundError(f"Document not found: {document_id}", context={"document_id": document_id})

        await self.repository.delete_document(document_id)
        logger.info(f"Deleted document: {document_id}")
