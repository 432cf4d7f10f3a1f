"""Per-preset sync persistence: snapshot assembly and incremental upserts."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from calcul8tr_sync.store.base import PARTITION_KEY_FIELD, is_not_found
from calcul8tr_sync.sync.documents import (
    DocType,
    build_incoming_units,
    build_legacy_snapshot_document,
    build_meta_document,
    build_preset_document,
    document_to_unit,
    legacy_snapshot_id,
    meta_document_id,
    preset_document_id,
)
from calcul8tr_sync.sync.preset_diff import calculate_preset_diff
from calcul8tr_sync.sync.versioning import coerce_version
from calcul8tr_sync.utils.timeutils import EPOCH_ISO

if TYPE_CHECKING:
    from calcul8tr_sync.store.base import DocumentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncSnapshot:
    """Full logical sync state of one user at a point in time."""

    presets: list[Any] = field(default_factory=list)
    sales_by_preset: dict[str, list[Any]] = field(default_factory=dict)
    version: int = 0
    updated_at: str | None = None

    @classmethod
    def empty(cls) -> SyncSnapshot:
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {
            "presets": self.presets,
            "salesByPreset": self.sales_by_preset,
            "version": self.version,
            "updatedAt": self.updated_at,
        }


class SnapshotSource(StrEnum):
    """Where a snapshot read was resolved from."""

    PER_PRESET = "per_preset"
    LEGACY = "legacy"
    ABSENT = "absent"


@dataclass(frozen=True)
class SnapshotRead:
    """Result of resolving a user's snapshot across storage formats."""

    source: SnapshotSource
    snapshot: SyncSnapshot | None = None


@dataclass(frozen=True)
class IncrementalSyncResult:
    """Outcome of applying one incoming state."""

    changed: bool
    upserted_count: int = 0
    deleted_count: int = 0


def _latest_iso(current: str, candidate: Any) -> str:
    # All timestamps share one zero-padded ISO-8601 form.
    if isinstance(candidate, str) and candidate > current:
        return candidate
    return current


class SyncRepository:
    """Reads and writes a user's sync documents in one partitioned container.

    The repository is stateless apart from the injected store; every call
    is an independent unit of work.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    # ========== Reads ==========

    async def get_preset_documents(self, user_id: str) -> list[dict[str, Any]]:
        """All preset-unit documents in a user's partition."""
        return await self._store.query_items(
            user_id,
            **{PARTITION_KEY_FIELD: user_id, "docType": DocType.SYNC_PRESET.value},
        )

    async def _read_optional(self, item_id: str, user_id: str) -> dict[str, Any] | None:
        try:
            return await self._store.read_item(item_id, user_id)
        except Exception as e:
            if is_not_found(e):
                return None
            raise

    async def get_meta_document(self, user_id: str) -> dict[str, Any] | None:
        return await self._read_optional(meta_document_id(user_id), user_id)

    async def get_legacy_snapshot(self, user_id: str) -> SyncSnapshot | None:
        """Read the pre-migration single-document snapshot, if any."""
        document = await self._read_optional(legacy_snapshot_id(user_id), user_id)
        if document is None:
            return None

        presets = document.get("presets")
        sales_by_preset = document.get("salesByPreset")
        updated_at = document.get("updatedAt")
        return SyncSnapshot(
            presets=presets if isinstance(presets, list) else [],
            sales_by_preset=sales_by_preset if isinstance(sales_by_preset, dict) else {},
            version=coerce_version(document.get("version")),
            updated_at=updated_at if isinstance(updated_at, str) else None,
        )

    async def read_snapshot(self, user_id: str) -> SnapshotRead:
        """Resolve a user's snapshot, preferring per-preset documents.

        Preset documents and the meta record are fetched concurrently. The
        legacy snapshot is consulted only when no preset documents exist.
        """
        preset_documents, meta_document = await asyncio.gather(
            self.get_preset_documents(user_id),
            self.get_meta_document(user_id),
        )

        if not preset_documents:
            legacy = await self.get_legacy_snapshot(user_id)
            if legacy is None:
                return SnapshotRead(SnapshotSource.ABSENT)
            return SnapshotRead(SnapshotSource.LEGACY, legacy)

        presets: list[Any] = []
        sales_by_preset: dict[str, list[Any]] = {}
        max_version = 0
        latest_updated_at = EPOCH_ISO

        for document in preset_documents:
            presets.append(document.get("preset"))
            sales = document.get("sales")
            sales_by_preset[str(document.get("presetId", ""))] = (
                sales if isinstance(sales, list) else []
            )
            max_version = max(max_version, coerce_version(document.get("version")))
            latest_updated_at = _latest_iso(latest_updated_at, document.get("updatedAt"))

        if meta_document is not None:
            max_version = max(max_version, coerce_version(meta_document.get("version")))
            latest_updated_at = _latest_iso(latest_updated_at, meta_document.get("updatedAt"))

        return SnapshotRead(
            SnapshotSource.PER_PRESET,
            SyncSnapshot(
                presets=presets,
                sales_by_preset=sales_by_preset,
                version=max_version,
                updated_at=latest_updated_at,
            ),
        )

    async def get_effective_snapshot(self, user_id: str) -> SyncSnapshot | None:
        """Current snapshot for a user, or None if nothing was ever synced."""
        result = await self.read_snapshot(user_id)
        return result.snapshot

    # ========== Writes ==========

    async def apply_incremental_sync(
        self,
        user_id: str,
        presets: list[Any],
        sales_by_preset: dict[str, Any],
        version: int,
        updated_at: str,
    ) -> IncrementalSyncResult:
        """Persist only the preset units that differ from what is stored.

        Changed or new units are upserted stamped with ``version`` and
        ``updated_at``; units missing from the incoming state are deleted.
        The meta record is written last and only if something changed, so an
        identical re-push leaves version and timestamp untouched.

        There is no cross-document transaction: a store error aborts the
        remaining writes and propagates. Re-pushing the same state converges
        because the next diff runs against whatever did land.
        """
        existing_documents = await self.get_preset_documents(user_id)
        existing_units = [document_to_unit(doc) for doc in existing_documents]
        incoming_units = build_incoming_units(presets, sales_by_preset)
        diff = calculate_preset_diff(existing_units, incoming_units)

        incoming_by_id = {unit.preset_id: unit for unit in incoming_units}

        upserted_count = 0
        for preset_id in diff.upsert_ids:
            unit = incoming_by_id[preset_id]
            await self._store.upsert_item(build_preset_document(user_id, unit, version, updated_at))
            upserted_count += 1

        deleted_count = 0
        for preset_id in diff.delete_ids:
            try:
                await self._store.delete_item(preset_document_id(user_id, preset_id), user_id)
                deleted_count += 1
            except Exception as e:
                if not is_not_found(e):
                    raise

        changed = upserted_count > 0 or deleted_count > 0
        if changed:
            await self._store.upsert_item(build_meta_document(user_id, version, updated_at))
            logger.info(
                "Sync applied for %s: version=%d upserted=%d deleted=%d",
                user_id,
                version,
                upserted_count,
                deleted_count,
            )
        else:
            logger.debug("Sync push for %s was a no-op", user_id)

        return IncrementalSyncResult(
            changed=changed,
            upserted_count=upserted_count,
            deleted_count=deleted_count,
        )

    async def upsert_legacy_snapshot(
        self,
        user_id: str,
        presets: list[Any],
        sales_by_preset: dict[str, list[Any]],
        version: int,
        updated_at: str,
    ) -> dict[str, Any]:
        """Write a single-document snapshot in the pre-migration format."""
        return await self._store.upsert_item(
            build_legacy_snapshot_document(user_id, presets, sales_by_preset, version, updated_at)
        )

    async def _delete_if_exists(self, item_id: str, user_id: str) -> bool:
        try:
            await self._store.delete_item(item_id, user_id)
        except Exception as e:
            if is_not_found(e):
                return False
            raise
        return True

    async def delete_all_sync_data(self, user_id: str) -> int:
        """Erase every sync document for a user.

        Preset units go first, then the meta record, then the legacy
        snapshot. Missing documents are skipped.

        Returns:
            Number of documents actually deleted
        """
        deleted = 0
        for document in await self.get_preset_documents(user_id):
            if await self._delete_if_exists(str(document["id"]), user_id):
                deleted += 1

        if await self._delete_if_exists(meta_document_id(user_id), user_id):
            deleted += 1
        if await self._delete_if_exists(legacy_snapshot_id(user_id), user_id):
            deleted += 1

        logger.info("Deleted %d sync documents for %s", deleted, user_id)
        return deleted
