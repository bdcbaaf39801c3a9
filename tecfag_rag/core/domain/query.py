"""Query analysis and multi-query result models."""

from dataclasses import dataclass, field
from enum import Enum

from .chunk import VectorSearchResult


class QueryType(Enum):
    """Kind of question asked by the user.

    Drives the retrieval strategy, the amount of context fetched and the way
    that context is laid out for the model.

    Attributes:
        AGGREGATION: "Quantas máquinas?", "Liste todas as..."
        FACTUAL: "Qual a capacidade da TC20?"
        COMPARATIVE: "Compare A com B"
        EXPLORATORY: "O que temos sobre envasadoras?"
        PROCEDURAL: "Como operar a máquina X?"
        GREETING: "Bom dia", "Olá"
        GENERAL: Fallback bucket, never produced by the classifier ladder.
    """

    AGGREGATION = "aggregation"
    FACTUAL = "factual"
    COMPARATIVE = "comparative"
    EXPLORATORY = "exploratory"
    PROCEDURAL = "procedural"
    GREETING = "greeting"
    GENERAL = "general"


@dataclass
class QueryAnalysis:
    """Retrieval strategy computed once per user question.

    Attributes:
        type: Classified question type.
        context_size: Desired number of chunks.
        needs_multi_query: Whether to fan out over sub-queries.
        suggested_queries: Alternate phrasings for the fan-out, in order.
        categories: Product categories detected in the question.
        keywords: Significant terms left after stopword removal.
        is_count_query: Whether the question asks for a quantity.
        requires_full_scan: Whether whole documents must be retrieved.
            Always true when ``is_count_query`` is true.
    """

    type: QueryType
    context_size: int
    needs_multi_query: bool = False
    suggested_queries: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    is_count_query: bool = False
    requires_full_scan: bool = False


@dataclass
class QueryBreakdown:
    """How many chunks a single sub-query returned, before deduplication."""

    query: str
    chunks_found: int


@dataclass
class MultiQueryResult:
    """Deduplicated, ordered outcome of one orchestrated search."""

    chunks: list[VectorSearchResult]
    total_chunks_before_dedup: int
    query_breakdown: list[QueryBreakdown] = field(default_factory=list)

    @property
    def unique_documents(self) -> list[str]:
        """Distinct document ids present in ``chunks``, in first-seen order."""
        return list(dict.fromkeys(chunk.document_id for chunk in self.chunks))
