"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from calcul8tr_sync.store.base import DocumentStore
from calcul8tr_sync.store.memory_store import InMemoryDocumentStore
from calcul8tr_sync.store.sqlite_store import SQLiteDocumentStore
from calcul8tr_sync.sync.repository import SyncRepository
from calcul8tr_sync.sync.service import SyncService


class FixedClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        current = self._now
        self._now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest_asyncio.fixture
async def sync_store() -> AsyncGenerator[InMemoryDocumentStore, None]:
    """Create an in-memory sync container."""
    store = InMemoryDocumentStore("sync_data")
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def backend_sync_store(
    request: pytest.FixtureRequest, tmp_path: Path
) -> AsyncGenerator[DocumentStore, None]:
    """A sync container on each storage backend."""
    store: DocumentStore
    if request.param == "sqlite":
        store = SQLiteDocumentStore(tmp_path / "sync.db", "sync_data")
    else:
        store = InMemoryDocumentStore("sync_data")
    async with store:
        yield store


@pytest_asyncio.fixture
async def entitlements_store() -> AsyncGenerator[InMemoryDocumentStore, None]:
    store = InMemoryDocumentStore("entitlements")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def repository(sync_store: InMemoryDocumentStore) -> SyncRepository:
    return SyncRepository(sync_store)


@pytest.fixture
def service(repository: SyncRepository, clock: FixedClock) -> SyncService:
    return SyncService(repository, clock=clock)


@pytest.fixture
def sample_presets() -> list[dict[str, Any]]:
    """Two presets as the calculator app stores them."""
    return [
        {"id": 1, "name": "Energy drink", "packPrice": 7, "packSize": 12, "taxRate": 0.08},
        {"id": 2, "name": "Trading cards", "packPrice": 8, "packSize": 36, "taxRate": 0.0},
    ]


@pytest.fixture
def sample_sales() -> dict[str, list[dict[str, Any]]]:
    return {
        "1": [{"id": 10, "price": 7, "qty": 1}, {"id": 11, "price": 6.5, "qty": 2}],
        "2": [],
    }
