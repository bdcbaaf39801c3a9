"""Validation exceptions."""

from .base import TecfagRAGError


class ValidationError(TecfagRAGError):
    """Input validation failed."""

    error_code = "RAG_VAL_001"


class EmptyQueryError(ValidationError):
    """Question cannot be empty or whitespace only."""

    error_code = "RAG_VAL_002"
