"""Composition root."""

from .container import get_answer_service, get_indexer, get_vector_store

__all__ = ["get_answer_service", "get_indexer", "get_vector_store"]
