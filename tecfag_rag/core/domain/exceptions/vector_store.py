"""Vector store and chunk persistence exceptions."""

from .base import TecfagRAGError


class VectorStoreError(TecfagRAGError):
    """Base error for vector store operations."""

    error_code = "RAG_VEC_001"


class DimensionMismatchError(VectorStoreError):
    """Two vectors of different lengths were compared.

    Common causes:
    - The embedding model changed and documents were not reindexed
    - A chunk was stored with a truncated embedding
    """

    error_code = "RAG_VEC_002"


class ChunkStoreError(VectorStoreError):
    """Reading or writing chunk records failed."""

    error_code = "RAG_VEC_003"


class DocumentNotFoundError(VectorStoreError):
    """Requested document is not registered."""

    error_code = "RAG_VEC_004"
