"""Incremental per-preset synchronization."""

from calcul8tr_sync.sync.documents import DocType
from calcul8tr_sync.sync.preset_diff import (
    PresetDiff,
    PresetUnit,
    calculate_preset_diff,
    stable_serialize,
)
from calcul8tr_sync.sync.repository import (
    IncrementalSyncResult,
    SnapshotRead,
    SnapshotSource,
    SyncRepository,
    SyncSnapshot,
)
from calcul8tr_sync.sync.service import (
    SyncPushPayload,
    SyncService,
    SyncValidationError,
    parse_push_payload,
)
from calcul8tr_sync.sync.versioning import next_version

__all__ = [
    "DocType",
    "PresetDiff",
    "PresetUnit",
    "calculate_preset_diff",
    "stable_serialize",
    "IncrementalSyncResult",
    "SnapshotRead",
    "SnapshotSource",
    "SyncRepository",
    "SyncSnapshot",
    "SyncPushPayload",
    "SyncService",
    "SyncValidationError",
    "parse_push_payload",
    "next_version",
]
