"""Render retrieved chunks as the context block handed to the language model."""

from collections.abc import Sequence

from ..domain import QueryType, VectorSearchResult

DOCUMENT_RULE = "═" * 63
FLAT_SEPARATOR = "\n\n---\n\n"

GROUPED_TYPES = frozenset({QueryType.AGGREGATION, QueryType.EXPLORATORY})


def group_chunks_by_document(chunks: Sequence[VectorSearchResult]) -> dict[str, list[VectorSearchResult]]:
    """Group chunks by document, keeping first-seen document order.

    Chunks inside each group are sorted by ``chunk_index``.
    """
    grouped: dict[str, list[VectorSearchResult]] = {}
    for chunk in chunks:
        grouped.setdefault(chunk.document_id, []).append(chunk)

    for document_chunks in grouped.values():
        document_chunks.sort(key=lambda chunk: chunk.chunk_index)

    return grouped


def format_grouped_context(grouped: dict[str, list[VectorSearchResult]]) -> str:
    sections = []
    for index, document_chunks in enumerate(grouped.values(), start=1):
        file_name = document_chunks[0].file_name if document_chunks else "Documento"
        content = "\n\n".join(chunk.content for chunk in document_chunks)
        sections.append(f"{DOCUMENT_RULE}\n📄 DOCUMENTO {index}: {file_name}\n{DOCUMENT_RULE}\n{content}")
    return "\n\n".join(sections)


def format_flat_context(chunks: Sequence[VectorSearchResult]) -> str:
    """Chunks in the given order, each with a numbered source header."""
    return FLAT_SEPARATOR.join(
        f"[ID: {index} | Fonte: {chunk.file_name}]\n{chunk.content}"
        for index, chunk in enumerate(chunks, start=1)
    )


def format_context(chunks: Sequence[VectorSearchResult], query_type: QueryType) -> str:
    """Grouped layout for aggregation and exploratory questions, flat otherwise."""
    if query_type in GROUPED_TYPES:
        return format_grouped_context(group_chunks_by_document(chunks))
    return format_flat_context(chunks)
