"""Abstract base class for partitioned document stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

PARTITION_KEY_FIELD = "userId"


class DocumentStoreError(Exception):
    """Error from document store operations."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DocumentNotFoundError(DocumentStoreError):
    """The addressed document does not exist."""

    def __init__(self, item_id: str, partition_key: str) -> None:
        super().__init__(f"Document {item_id!r} not found in partition {partition_key!r}", 404)
        self.item_id = item_id
        self.partition_key = partition_key


def is_not_found(error: BaseException) -> bool:
    """Check whether an exception carries the store's not-found signal."""
    if isinstance(error, DocumentNotFoundError):
        return True
    return isinstance(error, DocumentStoreError) and error.status_code == 404


class DocumentStore(ABC):
    """
    Abstract interface for a partitioned JSON document container.

    Documents are addressed by ``(id, partition_key)``. The partition key of a
    document is the value of its ``userId`` field, so every user's documents
    live together and never leak across partitions.
    """

    def __init__(self, container: str) -> None:
        self._container = container

    @property
    def container(self) -> str:
        """Name of the container this store addresses."""
        return self._container

    async def initialize(self) -> None:  # noqa: B027
        """Prepare connections or schema. No-op by default."""

    async def close(self) -> None:  # noqa: B027
        """Release connections. No-op by default."""

    @abstractmethod
    async def read_item(self, item_id: str, partition_key: str) -> dict[str, Any]:
        """
        Read a single document.

        Args:
            item_id: Document ID
            partition_key: Partition the document lives in

        Returns:
            A copy of the stored document

        Raises:
            DocumentNotFoundError: If no such document exists
        """
        ...

    @abstractmethod
    async def upsert_item(self, document: dict[str, Any]) -> dict[str, Any]:
        """
        Insert or replace a document.

        Args:
            document: Document carrying ``id`` and ``userId`` fields

        Returns:
            The stored document

        Raises:
            DocumentStoreError: If the document lacks its id or partition key
        """
        ...

    @abstractmethod
    async def delete_item(self, item_id: str, partition_key: str) -> None:
        """
        Delete a single document.

        Raises:
            DocumentNotFoundError: If no such document exists
        """
        ...

    @abstractmethod
    async def query_items(self, partition_key: str, **equals: Any) -> list[dict[str, Any]]:
        """
        Find every document in a partition whose fields equal the given values.

        The full result set is returned in one call; there is no paging.

        Args:
            partition_key: Partition to search
            **equals: Top-level field name to required value

        Returns:
            Matching documents in insertion order
        """
        ...

    async def __aenter__(self) -> DocumentStore:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()


def require_keys(document: dict[str, Any]) -> tuple[str, str]:
    """Return ``(id, partition_key)`` of a document or raise DocumentStoreError."""
    item_id = document.get("id")
    partition_key = document.get(PARTITION_KEY_FIELD)
    if not isinstance(item_id, str) or not item_id:
        raise DocumentStoreError("Document is missing a string 'id'", 400)
    if not isinstance(partition_key, str) or not partition_key:
        raise DocumentStoreError(f"Document is missing partition key '{PARTITION_KEY_FIELD}'", 400)
    return item_id, partition_key


def matches(document: dict[str, Any], equals: dict[str, Any]) -> bool:
    """Check a document against an equality predicate."""
    return all(key in document and document[key] == value for key, value in equals.items())
