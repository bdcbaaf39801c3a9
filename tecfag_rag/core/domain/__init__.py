"""Domain models for the Tecfag RAG core.

Models are organized by domain area:

- chunk: Chunk, DocumentRecord and VectorSearchResult for the vector store
- query: QueryType, QueryAnalysis and MultiQueryResult for retrieval planning
- answer: chat, completion and answer models

All models are re-exported here for convenient importing:

    from tecfag_rag.core.domain import Chunk, QueryAnalysis, VectorSearchResult
"""

from .answer import (
    ChatMessage,
    ChatMode,
    ChatResponse,
    Completion,
    CompletionOptions,
    SourceCitation,
    TokenUsage,
    UserProfile,
)
from .chunk import Chunk, ChunkMetadata, DocumentRecord, DocumentStats, VectorSearchResult
from .query import MultiQueryResult, QueryAnalysis, QueryBreakdown, QueryType

__all__ = [
    # Chunk models
    "Chunk",
    "ChunkMetadata",
    "DocumentRecord",
    "DocumentStats",
    "VectorSearchResult",
    # Query models
    "QueryType",
    "QueryAnalysis",
    "QueryBreakdown",
    "MultiQueryResult",
    # Answer models
    "ChatMessage",
    "ChatMode",
    "ChatResponse",
    "Completion",
    "CompletionOptions",
    "SourceCitation",
    "TokenUsage",
    "UserProfile",
]
