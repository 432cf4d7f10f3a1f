"""Cloud sync endpoints: pull the stored snapshot, push a full local state."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request

from calcul8tr_sync.server.dependencies import get_sync_service, resolve_user_id
from calcul8tr_sync.server.models import ErrorResponse, SyncPullResponse, SyncPushResponse
from calcul8tr_sync.sync.service import SyncService, SyncValidationError, parse_push_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post(
    "/pull",
    response_model=SyncPullResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Load the stored sync snapshot",
)
async def sync_pull(
    user_id: Annotated[str, Depends(resolve_user_id)],
    service: Annotated[SyncService, Depends(get_sync_service)],
) -> SyncPullResponse:
    """Return the user's presets and sales, or an empty snapshot at version 0."""
    try:
        result = await service.pull(user_id)
        response = SyncPullResponse.model_validate(result)
    except Exception:
        logger.error("POST /sync/pull failed for %s", user_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load cloud sync data.")

    return response


@router.post(
    "/push",
    response_model=SyncPushResponse,
    response_model_exclude_unset=True,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Save the full local state",
)
async def sync_push(
    request: Request,
    user_id: Annotated[str, Depends(resolve_user_id)],
    service: Annotated[SyncService, Depends(get_sync_service)],
) -> SyncPushResponse:
    """Diff the submitted state against storage and persist only changed presets.

    The body is ``{presets, salesByPreset, clientVersion?}``. Malformed bodies
    are rejected with 400 before anything is read or written.
    """
    try:
        body: Any = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body.")

    try:
        payload = parse_push_payload(body)
    except SyncValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = await service.push(user_id, payload)
        response = SyncPushResponse.model_validate(result)
    except Exception:
        logger.error("POST /sync/push failed for %s", user_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save cloud sync data.")

    return response
