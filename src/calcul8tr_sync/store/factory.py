"""Store factory for creating document stores based on configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from calcul8tr_sync.store.memory_store import InMemoryDocumentStore
from calcul8tr_sync.store.sqlite_store import SQLiteDocumentStore

if TYPE_CHECKING:
    from calcul8tr_sync.store.base import DocumentStore
    from calcul8tr_sync.utils.config import Config

logger = logging.getLogger(__name__)


async def create_document_store(config: Config, container: str) -> DocumentStore:
    """
    Create and initialize a document store for one container.

    Args:
        config: Application configuration
        container: Container name (e.g. ``config.sync_container_id``)

    Returns:
        Initialized store instance

    Raises:
        ValueError: If the configured backend is unknown
    """
    backend = config.storage_backend
    store: DocumentStore
    if backend == "memory":
        store = InMemoryDocumentStore(container)
    elif backend == "sqlite":
        store = SQLiteDocumentStore(config.sqlite_path, container)
    else:
        raise ValueError(f"Unknown storage backend: {backend!r} (expected 'memory' or 'sqlite')")

    await store.initialize()
    logger.info("Document store ready: backend=%s container=%s", backend, container)
    return store
