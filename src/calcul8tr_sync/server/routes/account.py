"""Account endpoints: entitlement lookup, data export and erasure."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from calcul8tr_sync.account.service import AccountService
from calcul8tr_sync.server.dependencies import get_account_service, resolve_user_id
from calcul8tr_sync.server.models import (
    AccountDeleteResponse,
    AccountExportResponse,
    EntitlementModel,
    ErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["account"])

_ERROR_RESPONSES = {401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.get(
    "/entitlements/me",
    response_model=EntitlementModel,
    response_model_exclude_unset=True,
    responses=_ERROR_RESPONSES,
    summary="Get the caller's pro-access flag",
)
async def entitlements_me(
    user_id: Annotated[str, Depends(resolve_user_id)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> EntitlementModel:
    try:
        summary = await service.get_entitlement_summary(user_id)
        response = EntitlementModel.model_validate(summary)
    except Exception:
        logger.error("GET /entitlements/me failed for %s", user_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load entitlements.")
    return response


@router.post(
    "/account/export",
    response_model=AccountExportResponse,
    responses=_ERROR_RESPONSES,
    summary="Export all data held for the caller",
)
async def account_export(
    user_id: Annotated[str, Depends(resolve_user_id)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountExportResponse:
    try:
        result = await service.export(user_id)
        response = AccountExportResponse.model_validate(result)
    except Exception:
        logger.error("POST /account/export failed for %s", user_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to export account data.")
    return response


@router.post(
    "/account/delete",
    response_model=AccountDeleteResponse,
    responses=_ERROR_RESPONSES,
    summary="Erase all data held for the caller",
)
async def account_delete(
    user_id: Annotated[str, Depends(resolve_user_id)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountDeleteResponse:
    """Delete the entitlement, every preset unit, the meta record and any legacy snapshot."""
    try:
        result = await service.delete(user_id)
        response = AccountDeleteResponse.model_validate(result)
    except Exception:
        logger.error("POST /account/delete failed for %s", user_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete account data.")
    return response
