"""Ports the core services depend on."""

from .chunk_repository_port import ChunkRepositoryPort
from .completion_port import CompletionPort
from .embedding_port import EmbeddingPort
from .vector_store_port import VectorStorePort

__all__ = ["ChunkRepositoryPort", "CompletionPort", "EmbeddingPort", "VectorStorePort"]
