"""Multi-query retrieval: fan out sub-queries, merge, deduplicate and rank."""

import asyncio
import logging
import math
from collections.abc import Iterable, Sequence

from ..domain import MultiQueryResult, QueryAnalysis, QueryBreakdown, VectorSearchResult
from ..domain.exceptions import DimensionMismatchError
from ..ports import EmbeddingPort, VectorStorePort

logger = logging.getLogger(__name__)

# File-name fragments of documents that hold catalog or inventory data
CATALOG_DOCUMENT_PATTERNS = [
    "planilha",
    "catalogo",
    "catálogo",
    "mapeamento",
    "lista",
    "inventario",
    "inventário",
    "todas",
    "completo",
]


def _merge_unique(
    merged: list[VectorSearchResult],
    seen_ids: set[str],
    chunks: Iterable[VectorSearchResult],
) -> None:
    """Append chunks whose id has not been seen yet (first occurrence wins)."""
    for chunk in chunks:
        if chunk.id not in seen_ids:
            seen_ids.add(chunk.id)
            merged.append(chunk)


class MultiQueryRAG:
    """Orchestrates the multi-query search for broad questions.

    Sub-queries run concurrently. A sub-query that fails or times out
    contributes zero chunks instead of aborting the search; only a dimension
    mismatch, which means the index is corrupt, propagates.
    """

    def __init__(
        self,
        embedder: EmbeddingPort,
        vector_store: VectorStorePort,
        sub_query_timeout: float | None = None,
        chunks_per_document: int = 2,
        catalog_patterns: Sequence[str] = tuple(CATALOG_DOCUMENT_PATTERNS),
    ) -> None:
        self.embedder = embedder
        self.vector_store = vector_store
        self.sub_query_timeout = sub_query_timeout
        self.chunks_per_document = chunks_per_document
        self.catalog_patterns = list(catalog_patterns)

    async def _search_one(self, query: str, top_k: int, catalog_id: str | None) -> list[VectorSearchResult]:
        embedding = await self.embedder.embed(query)
        return await self.vector_store.search(embedding, top_k=top_k, catalog_id=catalog_id)

    async def _run_query(self, query: str, top_k: int, catalog_id: str | None) -> list[VectorSearchResult]:
        try:
            return await asyncio.wait_for(
                self._search_one(query, top_k, catalog_id),
                timeout=self.sub_query_timeout,
            )
        except DimensionMismatchError:
            raise
        except TimeoutError:
            logger.warning(f"Sub-query timed out after {self.sub_query_timeout}s: {query!r}")
            return []
        except Exception as e:
            logger.warning(f"Sub-query failed: {query!r}: {e}", exc_info=True)
            return []

    async def _full_scan(self, catalog_id: str | None) -> tuple[list[VectorSearchResult], list[VectorSearchResult]]:
        """Whole catalog documents plus the first chunks of every document."""
        try:
            full_chunks = await self.vector_store.get_full_document_chunks(self.catalog_patterns, catalog_id)
        except DimensionMismatchError:
            raise
        except Exception as e:
            logger.warning(f"Full-document retrieval failed: {e}", exc_info=True)
            full_chunks = []

        logger.info(f"Retrieved {len(full_chunks)} chunks via full-document retrieval")

        try:
            document_chunks = await self.vector_store.search_by_document(
                catalog_id=catalog_id,
                chunks_per_document=self.chunks_per_document,
            )
        except DimensionMismatchError:
            raise
        except Exception as e:
            logger.warning(f"Document-level sampling failed: {e}", exc_info=True)
            document_chunks = []

        return full_chunks, document_chunks

    async def multi_query_search(
        self,
        question: str,
        analysis: QueryAnalysis,
        catalog_id: str | None = None,
    ) -> MultiQueryResult:
        """Run the original question and its sub-queries, then merge the results.

        Args:
            question: The user's question, always searched first.
            analysis: Analysis of ``question``; supplies sub-queries and sizing.
            catalog_id: Optional catalog filter applied to every search.

        Returns:
            Deduplicated chunks. Count questions keep every chunk ordered by
            ``(document_id, chunk_index)``; other questions keep the
            ``context_size`` most similar chunks.
        """
        queries = [question, *analysis.suggested_queries]
        chunks_per_query = math.ceil(analysis.context_size / max(len(queries), 1))

        logger.info(f"Executing {len(queries)} queries with {chunks_per_query} chunks each")

        # gather preserves input order, so the merge below follows the query list
        results = await asyncio.gather(
            *(self._run_query(query, chunks_per_query, catalog_id) for query in queries)
        )

        merged: list[VectorSearchResult] = []
        seen_ids: set[str] = set()
        breakdown: list[QueryBreakdown] = []

        for query, chunks in zip(queries, results):
            breakdown.append(QueryBreakdown(query=query, chunks_found=len(chunks)))
            _merge_unique(merged, seen_ids, chunks)

        if analysis.is_count_query or analysis.requires_full_scan:
            logger.info("Count/aggregation question, adding full-document retrieval")
            full_chunks, document_chunks = await self._full_scan(catalog_id)
            _merge_unique(merged, seen_ids, full_chunks)
            _merge_unique(merged, seen_ids, document_chunks)

        total_before_truncation = len(merged)

        if analysis.is_count_query:
            # Counting needs every chunk, in reading order per document
            final_chunks = sorted(merged, key=lambda chunk: (chunk.document_id, chunk.chunk_index))
            logger.info(f"Count question: keeping all {len(final_chunks)} chunks")
        else:
            final_chunks = sorted(merged, key=lambda chunk: chunk.similarity, reverse=True)
            final_chunks = final_chunks[: analysis.context_size]

        result = MultiQueryResult(
            chunks=final_chunks,
            total_chunks_before_dedup=total_before_truncation,
            query_breakdown=breakdown,
        )
        logger.info(
            f"Retrieved {len(result.chunks)} unique chunks from {len(result.unique_documents)} documents"
        )
        return result


def calculate_coverage_score(result: MultiQueryResult, expected_categories: Sequence[str]) -> float:
    """Rough measure of how much of the catalog a result covers.

    Without expected categories the score grows with the number of documents
    (five or fewer documents scale linearly, more than five score 1.0).
    Otherwise it is the fraction of expected categories mentioned anywhere in
    the retrieved content.
    """
    if not expected_categories:
        documents = len(result.unique_documents)
        return 1.0 if documents > 5 else documents / 5

    content = " ".join(chunk.content.lower() for chunk in result.chunks)
    covered = sum(1 for category in expected_categories if category in content)
    return covered / len(expected_categories)
