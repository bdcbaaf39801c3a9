"""Completion provider adapters."""

from .gemini_adapter import GeminiCompletionAdapter
from .groq_adapter import GroqCompletionAdapter

__all__ = ["GeminiCompletionAdapter", "GroqCompletionAdapter"]
