"""Embedding exceptions."""

from .base import TecfagRAGError


class EmbeddingError(TecfagRAGError):
    """Failed to generate embeddings."""

    error_code = "RAG_EMB_001"


class EmbeddingAPIError(EmbeddingError):
    """Embedding API returned an error."""

    error_code = "RAG_EMB_002"


class EmptyEmbeddingError(EmbeddingError):
    """Embedding API answered without a vector."""

    error_code = "RAG_EMB_003"
