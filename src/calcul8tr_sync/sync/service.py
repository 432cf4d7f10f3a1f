"""Push/pull use cases: payload validation and version assignment."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from calcul8tr_sync.sync.documents import preset_id_of
from calcul8tr_sync.sync.repository import SyncRepository, SyncSnapshot
from calcul8tr_sync.sync.versioning import next_version
from calcul8tr_sync.utils.timeutils import isoformat_z, utcnow

logger = logging.getLogger(__name__)


class SyncValidationError(ValueError):
    """A push payload is malformed; nothing was written."""


@dataclass(frozen=True)
class SyncPushPayload:
    """A validated push request body."""

    presets: list[dict[str, Any]] = field(default_factory=list)
    sales_by_preset: dict[str, list[Any]] = field(default_factory=dict)
    client_version: float | None = None


def _is_sales_by_preset(value: Any) -> bool:
    return isinstance(value, dict) and all(isinstance(entry, list) for entry in value.values())


def parse_push_payload(body: Any) -> SyncPushPayload:
    """Validate a decoded push body.

    Raises:
        SyncValidationError: On any shape violation, before storage is touched
    """
    if not isinstance(body, dict):
        raise SyncValidationError("Request body must be an object.")

    presets = body.get("presets")
    sales_by_preset = body.get("salesByPreset")
    client_version = body.get("clientVersion")

    if not isinstance(presets, list):
        raise SyncValidationError("Field 'presets' must be an array.")

    seen: set[str] = set()
    for preset in presets:
        preset_id = preset_id_of(preset)
        if preset_id is None:
            raise SyncValidationError("Each preset must be an object containing an 'id' field.")
        if preset_id in seen:
            raise SyncValidationError(f"Duplicate preset id '{preset_id}' in payload.")
        seen.add(preset_id)

    if not _is_sales_by_preset(sales_by_preset):
        raise SyncValidationError("Field 'salesByPreset' must be an object of arrays.")

    if client_version is not None and (
        isinstance(client_version, bool)
        or not isinstance(client_version, (int, float))
        or not math.isfinite(client_version)
    ):
        raise SyncValidationError("Field 'clientVersion' must be a number when provided.")

    return SyncPushPayload(
        presets=presets,
        sales_by_preset=sales_by_preset,
        client_version=client_version,
    )


class SyncService:
    """Coordinates pull and push for one authenticated user at a time."""

    def __init__(
        self,
        repository: SyncRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repository = repository
        self._clock = clock

    async def pull(self, user_id: str) -> dict[str, Any]:
        """Return the user's current snapshot, or an empty one."""
        snapshot = await self._repository.get_effective_snapshot(user_id)
        return {
            "userId": user_id,
            "snapshot": (snapshot or SyncSnapshot.empty()).to_dict(),
        }

    async def push(self, user_id: str, payload: SyncPushPayload) -> dict[str, Any]:
        """Apply a full client state and report the resulting version.

        A push identical to what is stored reports ``changed: False`` along
        with the prior version and timestamp, and omits the change counts.
        """
        existing = await self._repository.get_effective_snapshot(user_id)
        previous_version = existing.version if existing else 0
        version = next_version(previous_version, payload.client_version)
        updated_at = isoformat_z(self._clock())

        result = await self._repository.apply_incremental_sync(
            user_id,
            payload.presets,
            payload.sales_by_preset,
            version,
            updated_at,
        )

        if not result.changed:
            return {
                "ok": True,
                "userId": user_id,
                "version": previous_version,
                "updatedAt": existing.updated_at if existing else None,
                "changed": False,
            }

        return {
            "ok": True,
            "userId": user_id,
            "version": version,
            "updatedAt": updated_at,
            "changed": True,
            "upsertedCount": result.upserted_count,
            "deletedCount": result.deleted_count,
        }
