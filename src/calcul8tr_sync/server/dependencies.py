"""Shared dependencies for API routes."""

from __future__ import annotations

import logging
import re
from typing import Annotated

from fastapi import Depends, Header, HTTPException

from calcul8tr_sync.account.entitlements import EntitlementRepository
from calcul8tr_sync.account.service import AccountService
from calcul8tr_sync.store.base import DocumentStore
from calcul8tr_sync.sync.repository import SyncRepository
from calcul8tr_sync.sync.service import SyncService
from calcul8tr_sync.utils.config import Config, get_config

logger = logging.getLogger(__name__)

# Keep only characters safe inside storage ids.
_UNSAFE_USER_ID_CHARS = re.compile(r"[^A-Za-z0-9._:@-]")


def sanitize_user_id(raw_user_id: str) -> str:
    """Strip characters that could inject into document ids or keys."""
    return _UNSAFE_USER_ID_CHARS.sub("", raw_user_id).strip()


def get_app_config() -> Config:
    """Dependency to get configuration. Overridable in tests."""
    return get_config()


async def get_sync_store() -> DocumentStore:
    """
    Dependency to get the sync container store.

    This is overridden by the application at startup.
    """
    raise NotImplementedError("Sync store not configured")


async def get_entitlements_store() -> DocumentStore:
    """
    Dependency to get the entitlements container store.

    This is overridden by the application at startup.
    """
    raise NotImplementedError("Entitlements store not configured")


async def resolve_user_id(
    config: Annotated[Config, Depends(get_app_config)],
    x_user_id: Annotated[str | None, Header(alias="x-user-id")] = None,
) -> str:
    """Resolve the authenticated user from the identity header.

    Token verification happens upstream; this only trusts and sanitizes the
    header it leaves behind.
    """
    if x_user_id:
        user_id = sanitize_user_id(x_user_id)
        if user_id:
            return user_id

    if config.auth_bypass_dev and config.is_dev:
        raise HTTPException(
            status_code=401,
            detail="Missing x-user-id. In dev mode, send x-user-id header until Google auth is wired.",
        )
    raise HTTPException(status_code=401, detail="Authentication is required.")


async def get_sync_repository(
    store: Annotated[DocumentStore, Depends(get_sync_store)],
) -> SyncRepository:
    return SyncRepository(store)


async def get_sync_service(
    repository: Annotated[SyncRepository, Depends(get_sync_repository)],
) -> SyncService:
    return SyncService(repository)


async def get_account_service(
    repository: Annotated[SyncRepository, Depends(get_sync_repository)],
    entitlements_store: Annotated[DocumentStore, Depends(get_entitlements_store)],
) -> AccountService:
    return AccountService(repository, EntitlementRepository(entitlements_store))
