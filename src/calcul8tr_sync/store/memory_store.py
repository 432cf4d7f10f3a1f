"""In-memory document store for development and testing."""

from __future__ import annotations

import copy
from typing import Any

from calcul8tr_sync.store.base import (
    DocumentNotFoundError,
    DocumentStore,
    matches,
    require_keys,
)


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed document store.

    Data is lost when the process exits. Documents are deep-copied on the way
    in and out so callers never share mutable state with the store.
    """

    def __init__(self, container: str = "sync_data") -> None:
        super().__init__(container)
        # partition_key -> id -> document; dicts keep insertion order
        self._partitions: dict[str, dict[str, dict[str, Any]]] = {}

    async def read_item(self, item_id: str, partition_key: str) -> dict[str, Any]:
        document = self._partitions.get(partition_key, {}).get(item_id)
        if document is None:
            raise DocumentNotFoundError(item_id, partition_key)
        return copy.deepcopy(document)

    async def upsert_item(self, document: dict[str, Any]) -> dict[str, Any]:
        item_id, partition_key = require_keys(document)
        stored = copy.deepcopy(document)
        self._partitions.setdefault(partition_key, {})[item_id] = stored
        return copy.deepcopy(stored)

    async def delete_item(self, item_id: str, partition_key: str) -> None:
        partition = self._partitions.get(partition_key)
        if partition is None or item_id not in partition:
            raise DocumentNotFoundError(item_id, partition_key)
        del partition[item_id]
        if not partition:
            del self._partitions[partition_key]

    async def query_items(self, partition_key: str, **equals: Any) -> list[dict[str, Any]]:
        partition = self._partitions.get(partition_key, {})
        return [copy.deepcopy(doc) for doc in partition.values() if matches(doc, equals)]

    def count(self, partition_key: str | None = None) -> int:
        """Number of stored documents, optionally within one partition."""
        if partition_key is not None:
            return len(self._partitions.get(partition_key, {}))
        return sum(len(p) for p in self._partitions.values())
