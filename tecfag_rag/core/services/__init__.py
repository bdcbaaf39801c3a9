"""Core services of the RAG pipeline."""

from .answer_service import AnswerService
from .context_formatter import format_context, format_flat_context, format_grouped_context, group_chunks_by_document
from .document_indexer import DocumentIndexer, IndexingReport
from .multi_query import CATALOG_DOCUMENT_PATTERNS, MultiQueryRAG, calculate_coverage_score
from .query_analyzer import QueryAnalyzer, determine_context_size
from .vector_store import ExactVectorStore, cosine_similarity

__all__ = [
    "AnswerService",
    "CATALOG_DOCUMENT_PATTERNS",
    "DocumentIndexer",
    "ExactVectorStore",
    "IndexingReport",
    "MultiQueryRAG",
    "QueryAnalyzer",
    "calculate_coverage_score",
    "cosine_similarity",
    "determine_context_size",
    "format_context",
    "format_flat_context",
    "format_grouped_context",
    "group_chunks_by_document",
]
