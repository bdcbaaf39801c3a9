"""Exact (brute-force) vector search over the chunk repository."""

import dataclasses
import logging
from collections.abc import Sequence

import numpy as np

from ..domain import Chunk, DocumentRecord, DocumentStats, VectorSearchResult
from ..domain.exceptions import DimensionMismatchError
from ..ports import ChunkRepositoryPort, VectorStorePort

logger = logging.getLogger(__name__)

# Synthetic scores for chunks that were not ranked against a query
SEARCH_BY_DOCUMENT_SIMILARITY = 0.5
FULL_DOCUMENT_SIMILARITY = 0.8


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors, 0.0 when either has zero norm.

    Raises:
        DimensionMismatchError: If the vectors have different lengths.
    """
    if len(a) != len(b):
        raise DimensionMismatchError(
            "Vectors must have same dimensions",
            context={"left": len(a), "right": len(b)},
        )

    left = np.asarray(a, dtype=np.float64)
    right = np.asarray(b, dtype=np.float64)
    norm = float(np.linalg.norm(left) * np.linalg.norm(right))
    if norm == 0.0:
        return 0.0
    return float(np.dot(left, right) / norm)


def _scored_with_file_name(
    chunks: Sequence[Chunk],
    documents: dict[str, DocumentRecord],
    similarity: float,
) -> list[VectorSearchResult]:
    """Results at a fixed score, naming the source document when chunk metadata lacks it."""
    results = []
    for chunk in chunks:
        result = VectorSearchResult.from_chunk(chunk, similarity)
        document = documents.get(chunk.document_id)
        if result.metadata.file_name is None and document is not None:
            result.metadata = dataclasses.replace(result.metadata, file_name=document.file_name)
        results.append(result)
    return results


class ExactVectorStore(VectorStorePort):
    """Vector store that scores every candidate chunk.

    Results are exact: each chunk matching the filters is compared with the
    query vector, so ``search`` returns the true top-k.
    """

    def __init__(self, repository: ChunkRepositoryPort) -> None:
        self.repository = repository

    async def search(
        self,
        query_embedding: Sequence[float],
        top_k: int = 5,
        document_id: str | None = None,
        catalog_id: str | None = None,
    ) -> list[VectorSearchResult]:
        if top_k <= 0:
            return []

        chunks = await self.repository.find_many(document_id=document_id, catalog_id=catalog_id)
        scored = [
            VectorSearchResult.from_chunk(chunk, cosine_similarity(query_embedding, chunk.embedding))
            for chunk in chunks
        ]
        # Stable sort: equal scores keep repository order (document_id, chunk_index)
        scored.sort(key=lambda result: result.similarity, reverse=True)

        logger.debug(f"Scored {len(scored)} chunks, returning top {top_k}")
        return scored[:top_k]

    async def search_by_document(
        self,
        catalog_id: str | None = None,
        chunks_per_document: int = 2,
    ) -> list[VectorSearchResult]:
        documents = {doc.id: doc for doc in await self.repository.find_documents(catalog_id=catalog_id)}
        chunks = await self.repository.find_many(
            catalog_id=catalog_id,
            limit_per_document=chunks_per_document,
        )
        return _scored_with_file_name(chunks, documents, SEARCH_BY_DOCUMENT_SIMILARITY)

    async def get_full_document_chunks(
        self,
        document_patterns: Sequence[str],
        catalog_id: str | None = None,
    ) -> list[VectorSearchResult]:
        documents = await self.repository.find_documents(
            catalog_id=catalog_id,
            file_name_patterns=document_patterns,
        )
        if not documents:
            return []

        logger.info(
            f"Full-document retrieval matched {len(documents)} documents: "
            f"{', '.join(doc.file_name for doc in documents)}"
        )

        chunks = await self.repository.find_many(document_ids=[doc.id for doc in documents])
        return _scored_with_file_name(chunks, {doc.id: doc for doc in documents}, FULL_DOCUMENT_SIMILARITY)

    async def get_document_stats(self, catalog_id: str | None = None) -> DocumentStats:
        counts = await self.repository.chunk_counts(catalog_id=catalog_id)
        return DocumentStats(
            total_documents=len(counts),
            total_chunks=sum(count for _, count in counts),
            document_names=[doc.file_name for doc, _ in counts],
        )
