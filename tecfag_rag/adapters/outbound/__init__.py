"""Outbound adapters: persistence and external AI providers."""

from .embeddings import GeminiEmbeddingAdapter
from .llm import GeminiCompletionAdapter, GroqCompletionAdapter
from .sqlite_chunk_repository import SQLiteChunkRepository

__all__ = [
    "GeminiCompletionAdapter",
    "GeminiEmbeddingAdapter",
    "GroqCompletionAdapter",
    "SQLiteChunkRepository",
]
