"""Completion provider exceptions."""

from typing import Any

from .base import TecfagRAGError


class ProviderError(TecfagRAGError):
    """A completion provider failed to answer.

    Common causes:
    - Invalid API key
    - Rate limit or quota exhausted
    - Content filtered by safety settings
    """

    error_code = "RAG_LLM_001"


class EmptyCompletionError(ProviderError):
    """Provider answered without any text."""

    error_code = "RAG_LLM_002"


class ProviderUnavailableError(TecfagRAGError):
    """Both the primary and the fallback completion providers failed."""

    error_code = "RAG_LLM_003"

    def __init__(
        self,
        primary_name: str,
        primary_error: Exception,
        fallback_name: str,
        fallback_error: Exception,
        *,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.primary_error = primary_error
        self.fallback_error = fallback_error
        super().__init__(
            f"AI providers unavailable: {primary_name} ({primary_error}), "
            f"{fallback_name} ({fallback_error})",
            cause=fallback_error,
            context={"primary": primary_name, "fallback": fallback_name, **(context or {})},
        )
