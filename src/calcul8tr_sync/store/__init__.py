"""Document store adapters for calcul8tr-sync."""

from calcul8tr_sync.store.base import (
    DocumentNotFoundError,
    DocumentStore,
    DocumentStoreError,
    is_not_found,
)
from calcul8tr_sync.store.factory import create_document_store
from calcul8tr_sync.store.memory_store import InMemoryDocumentStore
from calcul8tr_sync.store.sqlite_store import SQLiteDocumentStore

__all__ = [
    "DocumentStore",
    "DocumentStoreError",
    "DocumentNotFoundError",
    "InMemoryDocumentStore",
    "SQLiteDocumentStore",
    "create_document_store",
    "is_not_found",
]
