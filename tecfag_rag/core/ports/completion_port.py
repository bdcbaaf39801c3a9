"""Completion Port Interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..domain import ChatMessage, Completion, CompletionOptions


class CompletionPort(ABC):
    """Abstract interface for LLM completion providers."""

    name: str
    model: str

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        history: Sequence[ChatMessage] = (),
        options: CompletionOptions | None = None,
    ) -> Completion:
        """Generate a completion, raising ``ProviderError`` on failure."""
        ...
