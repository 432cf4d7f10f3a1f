"""SQLite document store for persistent single-instance deployments."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import aiosqlite

from calcul8tr_sync.store.base import (
    DocumentNotFoundError,
    DocumentStore,
    DocumentStoreError,
    matches,
    require_keys,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    container TEXT NOT NULL,
    partition_key TEXT NOT NULL,
    id TEXT NOT NULL,
    body TEXT NOT NULL,
    UNIQUE (container, partition_key, id)
);
CREATE INDEX IF NOT EXISTS idx_documents_partition ON documents(container, partition_key);
"""


class SQLiteDocumentStore(DocumentStore):
    """SQLite-backed document container.

    Several containers may share one database file; each row is scoped by
    container name and partition key. Bodies are stored as JSON text.
    """

    def __init__(self, db_path: str | Path, container: str = "sync_data") -> None:
        super().__init__(container)
        self._db_path = Path(db_path).expanduser().resolve()
        self._conn: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Open the connection and create the schema."""
        if self._conn is not None:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row

        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA synchronous=NORMAL")
        await self._conn.executescript(SCHEMA)
        await self._conn.commit()
        logger.debug("Opened document store %s (container=%s)", self._db_path, self._container)

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _ensure_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise DocumentStoreError("Document store not initialized. Call initialize() first.")
        return self._conn

    async def read_item(self, item_id: str, partition_key: str) -> dict[str, Any]:
        conn = self._ensure_conn()
        async with conn.execute(
            "SELECT body FROM documents WHERE container = ? AND partition_key = ? AND id = ?",
            (self._container, partition_key, item_id),
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            raise DocumentNotFoundError(item_id, partition_key)
        return _load_body(row["body"], item_id)

    async def upsert_item(self, document: dict[str, Any]) -> dict[str, Any]:
        item_id, partition_key = require_keys(document)
        conn = self._ensure_conn()
        try:
            body = json.dumps(document, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise DocumentStoreError(f"Document {item_id!r} is not JSON serializable: {e}", 400) from e

        await conn.execute(
            """INSERT INTO documents (container, partition_key, id, body)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(container, partition_key, id) DO UPDATE SET body = excluded.body""",
            (self._container, partition_key, item_id, body),
        )
        await conn.commit()
        return json.loads(body)

    async def delete_item(self, item_id: str, partition_key: str) -> None:
        conn = self._ensure_conn()
        cursor = await conn.execute(
            "DELETE FROM documents WHERE container = ? AND partition_key = ? AND id = ?",
            (self._container, partition_key, item_id),
        )
        await conn.commit()
        if cursor.rowcount == 0:
            raise DocumentNotFoundError(item_id, partition_key)

    async def query_items(self, partition_key: str, **equals: Any) -> list[dict[str, Any]]:
        conn = self._ensure_conn()
        async with conn.execute(
            """SELECT id, body FROM documents
               WHERE container = ? AND partition_key = ?
               ORDER BY seq ASC""",
            (self._container, partition_key),
        ) as cursor:
            rows = await cursor.fetchall()

        documents = [_load_body(row["body"], row["id"]) for row in rows]
        return [doc for doc in documents if matches(doc, equals)]


def _load_body(raw: str, item_id: str) -> dict[str, Any]:
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DocumentStoreError(f"Corrupt document body for {item_id!r}: {e}") from e
    if not isinstance(document, dict):
        raise DocumentStoreError(f"Corrupt document body for {item_id!r}: not an object")
    return document
