"""calcul8tr-sync - incremental cloud sync backend for calcul8tr presets and sales."""

from calcul8tr_sync.store.base import DocumentNotFoundError, DocumentStore, DocumentStoreError
from calcul8tr_sync.sync.preset_diff import PresetDiff, PresetUnit, calculate_preset_diff
from calcul8tr_sync.sync.repository import SyncRepository
from calcul8tr_sync.sync.service import SyncService
from calcul8tr_sync.sync.versioning import next_version

__version__ = "0.1.0"

__all__ = [
    # Storage
    "DocumentStore",
    "DocumentStoreError",
    "DocumentNotFoundError",
    # Sync
    "PresetDiff",
    "PresetUnit",
    "calculate_preset_diff",
    "next_version",
    "SyncRepository",
    "SyncService",
    # Version
    "__version__",
]
