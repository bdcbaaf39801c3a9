"""SQLite adapter for document and chunk persistence."""

import asyncio
import json
import logging
import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ...core.domain import Chunk, ChunkMetadata, DocumentRecord
from ...core.domain.exceptions import ChunkStoreError
from ...core.ports import ChunkRepositoryPort

logger = logging.getLogger(__name__)

_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS documents (
        id TEXT PRIMARY KEY,
        file_name TEXT NOT NULL,
        file_type TEXT,
        catalog_id TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS document_chunks (
        id TEXT PRIMARY KEY,
        document_id TEXT NOT NULL,
        content TEXT NOT NULL,
        chunk_index INTEGER NOT NULL,
        embedding TEXT NOT NULL,
        metadata TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (document_id, chunk_index)
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_documents_catalog
    ON documents(catalog_id)
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_chunks_document
    ON document_chunks(document_id, chunk_index)
    """,
]

_CHUNK_COLUMNS = "c.id, c.document_id, c.content, c.chunk_index, c.embedding, c.metadata"

_INSERT_CHUNK = """
    INSERT INTO document_chunks (id, document_id, content, chunk_index, embedding, metadata)
    VALUES (?, ?, ?, ?, ?, ?)
"""

_UPSERT_DOCUMENT = """
    INSERT INTO documents (id, file_name, file_type, catalog_id)
    VALUES (?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        file_name = excluded.file_name,
        file_type = excluded.file_type,
        catalog_id = excluded.catalog_id
"""


class SQLiteChunkRepository(ChunkRepositoryPort):
    """Chunk repository backed by a local SQLite file.

    Embeddings and metadata are stored as JSON text. Every public method runs
    its blocking SQLite work in a worker thread so callers can fan out
    concurrently.
    """

    def __init__(self, db_path: str | Path = "data/tecfag_rag.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        try:
            with self._connect() as conn:
                for statement in _SCHEMA:
                    conn.execute(statement)
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize database: {e}")
            raise ChunkStoreError(
                "Failed to initialize chunk database",
                cause=e,
                context={"db_path": str(self.db_path)},
            ) from e

    def _run(self, operation: str, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        try:
            with self._connect() as conn:
                rows = conn.execute(sql, params).fetchall()
                conn.commit()
                return rows
        except sqlite3.Error as e:
            logger.error(f"Failed to {operation}: {e}")
            raise ChunkStoreError(f"Failed to {operation}", cause=e) from e

    @staticmethod
    def _row_to_chunk(row: sqlite3.Row) -> Chunk:
        return Chunk(
            id=row["id"],
            document_id=row["document_id"],
            content=row["content"],
            chunk_index=row["chunk_index"],
            embedding=json.loads(row["embedding"]),
            metadata=ChunkMetadata.from_dict(json.loads(row["metadata"]) if row["metadata"] else None),
        )

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> DocumentRecord:
        return DocumentRecord(
            id=row["id"],
            file_name=row["file_name"],
            file_type=row["file_type"],
            catalog_id=row["catalog_id"],
        )

    # Chunks

    @staticmethod
    def _chunk_rows(chunks: Sequence[Chunk]) -> list[tuple[Any, ...]]:
        return [
            (
                chunk.id,
                chunk.document_id,
                chunk.content,
                chunk.chunk_index,
                json.dumps(chunk.embedding),
                json.dumps(chunk.metadata.to_dict(), ensure_ascii=False),
            )
            for chunk in chunks
        ]

    def _create_many_sync(self, chunks: Sequence[Chunk]) -> int:
        rows = self._chunk_rows(chunks)
        try:
            with self._connect() as conn:
                conn.executemany(_INSERT_CHUNK, rows)
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to insert chunks: {e}")
            raise ChunkStoreError(
                "Failed to insert chunks",
                cause=e,
                context={"chunk_count": len(rows)},
            ) from e
        return len(rows)

    async def create_many(self, chunks: Sequence[Chunk]) -> int:
        if not chunks:
            return 0
        return await asyncio.to_thread(self._create_many_sync, list(chunks))

    def _delete_many_sync(self, document_id: str) -> int:
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM document_chunks WHERE document_id = ?", (document_id,))
                conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to delete chunks of {document_id}: {e}")
            raise ChunkStoreError(
                "Failed to delete chunks",
                cause=e,
                context={"document_id": document_id},
            ) from e

    async def delete_many(self, document_id: str) -> int:
        return await asyncio.to_thread(self._delete_many_sync, document_id)

    async def count(self, document_id: str) -> int:
        rows = await asyncio.to_thread(
            self._run,
            "count chunks",
            "SELECT COUNT(*) AS total FROM document_chunks WHERE document_id = ?",
            (document_id,),
        )
        return rows[0]["total"]

    def _find_many_sync(
        self,
        document_id: str | None,
        catalog_id: str | None,
        document_ids: Sequence[str] | None,
        limit_per_document: int | None,
    ) -> list[Chunk]:
        clauses: list[str] = []
        params: list[Any] = []

        if document_id is not None:
            clauses.append("c.document_id = ?")
            params.append(document_id)
        if catalog_id is not None:
            clauses.append("d.catalog_id = ?")
            params.append(catalog_id)
        if document_ids is not None:
            if not document_ids:
                return []
            placeholders = ", ".join("?" for _ in document_ids)
            clauses.append(f"c.document_id IN ({placeholders})")
            params.extend(document_ids)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        sql = f"""
            SELECT {_CHUNK_COLUMNS},
                   ROW_NUMBER() OVER (PARTITION BY c.document_id ORDER BY c.chunk_index) AS position
            FROM document_chunks c
            LEFT JOIN documents d ON d.id = c.document_id
            {where}
        """
        if limit_per_document is not None:
            sql = f"SELECT * FROM ({sql}) c WHERE c.position <= ?"
            params.append(limit_per_document)
        sql += " ORDER BY document_id, chunk_index"

        rows = self._run("query chunks", sql, params)
        return [self._row_to_chunk(row) for row in rows]

    async def find_many(
        self,
        document_id: str | None = None,
        catalog_id: str | None = None,
        document_ids: Sequence[str] | None = None,
        limit_per_document: int | None = None,
    ) -> list[Chunk]:
        return await asyncio.to_thread(
            self._find_many_sync,
            document_id,
            catalog_id,
            list(document_ids) if document_ids is not None else None,
            limit_per_document,
        )

    # Documents

    async def upsert_document(self, record: DocumentRecord) -> None:
        await asyncio.to_thread(
            self._run,
            "save document",
            _UPSERT_DOCUMENT,
            (record.id, record.file_name, record.file_type, record.catalog_id),
        )

    def _replace_document_sync(self, record: DocumentRecord, chunks: Sequence[Chunk]) -> int:
        rows = self._chunk_rows(chunks)
        try:
            # One transaction: a failed insert leaves the previous chunks in place
            with self._connect() as conn:
                conn.execute(_UPSERT_DOCUMENT, (record.id, record.file_name, record.file_type, record.catalog_id))
                removed = conn.execute("DELETE FROM document_chunks WHERE document_id = ?", (record.id,)).rowcount
                conn.executemany(_INSERT_CHUNK, rows)
                conn.commit()
                return removed
        except sqlite3.Error as e:
            logger.error(f"Failed to replace chunks of {record.id}: {e}")
            raise ChunkStoreError(
                "Failed to replace document chunks",
                cause=e,
                context={"document_id": record.id, "chunk_count": len(rows)},
            ) from e

    async def replace_document(self, record: DocumentRecord, chunks: Sequence[Chunk]) -> int:
        return await asyncio.to_thread(self._replace_document_sync, record, list(chunks))

    async def get_document(self, document_id: str) -> DocumentRecord | None:
        rows = await asyncio.to_thread(
            self._run,
            "load document",
            "SELECT id, file_name, file_type, catalog_id FROM documents WHERE id = ?",
            (document_id,),
        )
        return self._row_to_document(rows[0]) if rows else None

    def _delete_document_sync(self, document_id: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM document_chunks WHERE document_id = ?", (document_id,))
                conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to delete document {document_id}: {e}")
            raise ChunkStoreError(
                "Failed to delete document",
                cause=e,
                context={"document_id": document_id},
            ) from e

    async def delete_document(self, document_id: str) -> None:
        await asyncio.to_thread(self._delete_document_sync, document_id)

    def _find_documents_sync(
        self,
        catalog_id: str | None,
        file_name_patterns: Sequence[str] | None,
    ) -> list[DocumentRecord]:
        clauses: list[str] = []
        params: list[Any] = []

        if catalog_id is not None:
            clauses.append("catalog_id = ?")
            params.append(catalog_id)
        if file_name_patterns is not None:
            if not file_name_patterns:
                return []
            # instr() is case-sensitive, unlike LIKE
            clauses.append("(" + " OR ".join("instr(file_name, ?) > 0" for _ in file_name_patterns) + ")")
            params.extend(file_name_patterns)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._run(
            "query documents",
            f"SELECT id, file_name, file_type, catalog_id FROM documents {where} ORDER BY rowid",
            params,
        )
        return [self._row_to_document(row) for row in rows]

    async def find_documents(
        self,
        catalog_id: str | None = None,
        file_name_patterns: Sequence[str] | None = None,
    ) -> list[DocumentRecord]:
        return await asyncio.to_thread(
            self._find_documents_sync,
            catalog_id,
            list(file_name_patterns) if file_name_patterns is not None else None,
        )

    async def chunk_counts(self, catalog_id: str | None = None) -> list[tuple[DocumentRecord, int]]:
        where = "WHERE d.catalog_id = ?" if catalog_id is not None else ""
        params = (catalog_id,) if catalog_id is not None else ()
        rows = await asyncio.to_thread(
            self._run,
            "count chunks per document",
            f"""
            SELECT d.id, d.file_name, d.file_type, d.catalog_id, COUNT(c.id) AS chunk_count
            FROM documents d
            LEFT JOIN document_chunks c ON c.document_id = d.id
            {where}
            GROUP BY d.id
            ORDER BY d.rowid
            """,
            params,
        )
        return [(self._row_to_document(row), row["chunk_count"]) for row in rows]
