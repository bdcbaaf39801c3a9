"""Embedding provider adapters."""

from .gemini_embeddings import GeminiEmbeddingAdapter

__all__ = ["GeminiEmbeddingAdapter"]
