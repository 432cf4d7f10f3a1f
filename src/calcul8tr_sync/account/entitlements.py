"""Entitlement records gating pro features such as cloud sync."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from calcul8tr_sync.store.base import PARTITION_KEY_FIELD, is_not_found
from calcul8tr_sync.sync.documents import entitlement_id

if TYPE_CHECKING:
    from calcul8tr_sync.store.base import DocumentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntitlementRecord:
    """Pro-access flag for one user."""

    user_id: str
    has_pro_access: bool
    updated_at: str
    purchase_source: str | None = None

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "id": entitlement_id(self.user_id),
            PARTITION_KEY_FIELD: self.user_id,
            "hasProAccess": self.has_pro_access,
            "updatedAt": self.updated_at,
        }
        if self.purchase_source is not None:
            document["purchaseSource"] = self.purchase_source
        return document

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "hasProAccess": self.has_pro_access,
            "purchaseSource": self.purchase_source,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> EntitlementRecord:
        source = document.get("purchaseSource")
        return cls(
            user_id=str(document[PARTITION_KEY_FIELD]),
            has_pro_access=document.get("hasProAccess") is True,
            updated_at=str(document.get("updatedAt", "")),
            purchase_source=source if isinstance(source, str) else None,
        )


class EntitlementRepository:
    """Entitlement persistence in its own container."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def get(self, user_id: str) -> EntitlementRecord | None:
        try:
            document = await self._store.read_item(entitlement_id(user_id), user_id)
        except Exception as e:
            if is_not_found(e):
                return None
            raise
        return EntitlementRecord.from_document(document)

    async def upsert(self, record: EntitlementRecord) -> EntitlementRecord:
        stored = await self._store.upsert_item(record.to_document())
        return EntitlementRecord.from_document(stored)

    async def delete(self, user_id: str) -> bool:
        """Delete a user's entitlement. Returns False if there was none."""
        try:
            await self._store.delete_item(entitlement_id(user_id), user_id)
        except Exception as e:
            if is_not_found(e):
                return False
            raise
        logger.info("Deleted entitlement for %s", user_id)
        return True
