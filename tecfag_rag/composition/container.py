"""Composition root wiring adapters to the core services."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..adapters.common.rate_limiter import AsyncRateLimiter
from ..adapters.outbound.embeddings import GeminiEmbeddingAdapter
from ..adapters.outbound.llm import GeminiCompletionAdapter, GroqCompletionAdapter
from ..adapters.outbound.sqlite_chunk_repository import SQLiteChunkRepository
from ..config import settings
from ..core.domain import CompletionOptions
from ..core.services import (
    AnswerService,
    DocumentIndexer,
    ExactVectorStore,
    MultiQueryRAG,
    QueryAnalyzer,
)

logger = logging.getLogger(__name__)


@lru_cache
def get_repository() -> SQLiteChunkRepository:
    logger.info(f"Initializing SQLiteChunkRepository at {settings.sqlite_path}...")
    settings.ensure_directories()
    return SQLiteChunkRepository(settings.sqlite_path)


@lru_cache
def get_vector_store() -> ExactVectorStore:
    return ExactVectorStore(get_repository())


@lru_cache
def get_embedder() -> GeminiEmbeddingAdapter:
    logger.info("Initializing GeminiEmbeddingAdapter...")
    return GeminiEmbeddingAdapter(
        api_key=settings.gemini_api_key,
        model_name=settings.embedding_model,
        dimensions=settings.embedding_dimensions,
        batch_size=settings.embedding_batch_size,
        batch_delay=settings.embedding_batch_delay,
        rate_limiter=AsyncRateLimiter(settings.embedding_requests_per_minute),
    )


@lru_cache
def get_primary_llm() -> GeminiCompletionAdapter:
    logger.info("Initializing GeminiCompletionAdapter...")
    return GeminiCompletionAdapter(
        api_key=settings.gemini_api_key,
        model=settings.llm_model,
        rate_limiter=AsyncRateLimiter(settings.llm_requests_per_minute),
    )


@lru_cache
def get_fallback_llm() -> GroqCompletionAdapter:
    logger.info("Initializing GroqCompletionAdapter...")
    return GroqCompletionAdapter(
        api_key=settings.groq_api_key,
        model=settings.fallback_llm_model,
        base_url=settings.groq_base_url,
        rate_limiter=AsyncRateLimiter(settings.llm_requests_per_minute),
    )


@lru_cache
def get_multi_query() -> MultiQueryRAG:
    return MultiQueryRAG(
        get_embedder(),
        get_vector_store(),
        sub_query_timeout=settings.sub_query_timeout,
        chunks_per_document=settings.chunks_per_document,
    )


@lru_cache
def get_answer_service() -> AnswerService:
    logger.info("Initializing AnswerService...")
    return AnswerService(
        QueryAnalyzer(),
        get_embedder(),
        get_vector_store(),
        get_multi_query(),
        get_primary_llm(),
        get_fallback_llm(),
        primary_options=CompletionOptions(
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        ),
        fallback_options=CompletionOptions(
            temperature=settings.llm_temperature,
            max_tokens=settings.fallback_max_tokens,
        ),
        sample_vector_dimensions=settings.embedding_dimensions,
    )


@lru_cache
def get_indexer() -> DocumentIndexer:
    return DocumentIndexer(
        get_repository(),
        get_embedder(),
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
    )
