"""Chunk, document and search result models for the vector store."""

from dataclasses import dataclass, field
from typing import Any

DEFAULT_FILE_NAME = "Documento"


@dataclass
class ChunkMetadata:
    """Metadata attached to every chunk at ingestion time.

    ``file_name`` is the only field downstream consumers rely on. Anything
    else the ingestion pipeline wants to keep goes into ``extra``.
    """

    file_name: str | None = None
    file_type: str | None = None
    catalog_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        if self.file_name is not None:
            data["file_name"] = self.file_name
        if self.file_type is not None:
            data["file_type"] = self.file_type
        if self.catalog_id is not None:
            data["catalog_id"] = self.catalog_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ChunkMetadata":
        data = dict(data or {})
        return cls(
            file_name=data.pop("file_name", None),
            file_type=data.pop("file_type", None),
            catalog_id=data.pop("catalog_id", None),
            extra=data,
        )


@dataclass
class DocumentRecord:
    """A source document registered for retrieval.

    Attributes:
        id: Unique document identifier.
        file_name: Original file name, matched by full-document retrieval.
        file_type: File type/extension reported at upload.
        catalog_id: Optional catalog the document belongs to.
    """

    id: str
    file_name: str
    file_type: str | None = None
    catalog_id: str | None = None


@dataclass
class Chunk:
    """A contiguous slice of a document's extracted text.

    ``chunk_index`` is 0-based, unique within ``document_id`` and never
    renumbered once written.
    """

    id: str
    document_id: str
    content: str
    chunk_index: int
    embedding: list[float]
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)


@dataclass
class VectorSearchResult:
    """A chunk annotated with its similarity to one query.

    Two results with the same ``id`` are the same logical chunk, whatever
    similarity each query assigned it.
    """

    id: str
    document_id: str
    content: str
    chunk_index: int
    similarity: float
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    @property
    def file_name(self) -> str:
        return self.metadata.file_name or DEFAULT_FILE_NAME

    @classmethod
    def from_chunk(cls, chunk: Chunk, similarity: float) -> "VectorSearchResult":
        return cls(
            id=chunk.id,
            document_id=chunk.document_id,
            content=chunk.content,
            chunk_index=chunk.chunk_index,
            similarity=similarity,
            metadata=chunk.metadata,
        )


@dataclass
class DocumentStats:
    """Aggregate counts used to inform the model about the knowledge base."""

    total_documents: int
    total_chunks: int
    document_names: list[str]
