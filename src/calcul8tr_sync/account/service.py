"""Account-level export and erasure built on the sync and entitlement stores."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from calcul8tr_sync.account.entitlements import EntitlementRepository
from calcul8tr_sync.sync.repository import SyncRepository
from calcul8tr_sync.utils.timeutils import isoformat_z, utcnow

logger = logging.getLogger(__name__)


class AccountService:
    """Export or erase everything stored for a user."""

    def __init__(
        self,
        sync_repository: SyncRepository,
        entitlements: EntitlementRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._sync = sync_repository
        self._entitlements = entitlements
        self._clock = clock

    async def get_entitlement_summary(self, user_id: str) -> dict[str, Any]:
        record = await self._entitlements.get(user_id)
        return {
            "userId": user_id,
            "hasProAccess": record.has_pro_access if record else False,
            "updatedAt": record.updated_at if record else None,
        }

    async def export(self, user_id: str) -> dict[str, Any]:
        """Everything held for a user, in wire form."""
        entitlement = await self._entitlements.get(user_id)
        snapshot = await self._sync.get_effective_snapshot(user_id)
        return {
            "userId": user_id,
            "exportedAt": isoformat_z(self._clock()),
            "entitlement": entitlement.to_dict() if entitlement else None,
            "syncSnapshot": snapshot.to_dict() if snapshot else None,
        }

    async def delete(self, user_id: str) -> dict[str, Any]:
        """Erase the entitlement and all sync documents of a user."""
        await asyncio.gather(
            self._entitlements.delete(user_id),
            self._sync.delete_all_sync_data(user_id),
        )
        logger.info("Account data erased for %s", user_id)
        return {
            "ok": True,
            "userId": user_id,
            "deletedAt": isoformat_z(self._clock()),
        }
