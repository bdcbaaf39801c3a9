"""Custom exception hierarchy for the Tecfag RAG core.

Import from this package directly:

    from tecfag_rag.core.domain.exceptions import TecfagRAGError, EmbeddingError
"""

# Base classes
from .base import ExceptionContext, TecfagRAGError

# Configuration exceptions
from .configuration import ConfigurationError, MissingAPIKeyError

# Embedding exceptions
from .embedding import EmbeddingAPIError, EmbeddingError, EmptyEmbeddingError

# Completion provider exceptions
from .llm import EmptyCompletionError, ProviderError, ProviderUnavailableError

# Validation exceptions
from .validation import EmptyQueryError, ValidationError

# Vector store exceptions
from .vector_store import (
    ChunkStoreError,
    DimensionMismatchError,
    DocumentNotFoundError,
    VectorStoreError,
)

__all__ = [
    # Base
    "ExceptionContext",
    "TecfagRAGError",
    # Configuration
    "ConfigurationError",
    "MissingAPIKeyError",
    # Embedding
    "EmbeddingError",
    "EmbeddingAPIError",
    "EmptyEmbeddingError",
    # Completion
    "ProviderError",
    "EmptyCompletionError",
    "ProviderUnavailableError",
    # Validation
    "ValidationError",
    "EmptyQueryError",
    # Vector store
    "VectorStoreError",
    "DimensionMismatchError",
    "ChunkStoreError",
    "DocumentNotFoundError",
]
