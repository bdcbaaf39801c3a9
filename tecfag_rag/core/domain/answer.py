"""Chat, completion and answer models."""

from dataclasses import dataclass, field
from enum import Enum

from .query import QueryAnalysis


class ChatMode(Enum):
    """Conversational persona requested by the user."""

    DIRECT = "direct"
    CASUAL = "casual"
    EDUCATIONAL = "educational"
    PROFESSIONAL = "professional"


@dataclass
class ChatMessage:
    """A single message in the chat history."""

    role: str
    content: str


@dataclass
class UserProfile:
    """Optional information used to personalise answers."""

    name: str | None = None
    job_title: str | None = None
    department: str | None = None
    technical_level: str | None = None
    communication_style: str | None = None


@dataclass
class TokenUsage:
    """Token accounting reported by a completion provider."""

    input_tokens: int
    output_tokens: int
    total_tokens: int
    model: str


@dataclass
class CompletionOptions:
    """Generation parameters passed to a completion provider."""

    temperature: float = 0.3
    max_tokens: int = 4096
    system_prompt: str | None = None
    mode: ChatMode = ChatMode.EDUCATIONAL


@dataclass
class Completion:
    """Text returned by a completion provider."""

    text: str
    token_usage: TokenUsage | None = None


@dataclass
class SourceCitation:
    """A chunk that was handed to the model as context."""

    file_name: str
    chunk_index: int
    similarity: float


@dataclass
class ChatResponse:
    """Answer produced by the answer service."""

    response: str
    sources: list[SourceCitation] = field(default_factory=list)
    token_usage: TokenUsage | None = None
    analysis: QueryAnalysis | None = None
    used_fallback: bool = False
