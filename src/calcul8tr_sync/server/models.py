"""Pydantic models for API responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True)


# ============ Sync ============


class SnapshotModel(_WireModel):
    """A user's full synced state."""

    presets: list[Any] = Field(default_factory=list, description="Preset payloads")
    # Legacy snapshots are served as stored, so entries are not forced to lists.
    sales_by_preset: dict[str, Any] = Field(
        default_factory=dict,
        alias="salesByPreset",
        description="Sales ledger per preset id",
    )
    version: int = Field(0, description="Server-assigned monotonic version")
    updated_at: str | None = Field(None, alias="updatedAt", description="ISO-8601 UTC timestamp")


class SyncPullResponse(_WireModel):
    """Response from a sync pull."""

    user_id: str = Field(..., alias="userId")
    snapshot: SnapshotModel


class SyncPushResponse(_WireModel):
    """Response from a sync push.

    Change counts are present only when the push changed stored state.
    """

    ok: bool = True
    user_id: str = Field(..., alias="userId")
    version: int
    updated_at: str | None = Field(None, alias="updatedAt")
    changed: bool
    upserted_count: int | None = Field(None, alias="upsertedCount")
    deleted_count: int | None = Field(None, alias="deletedCount")


# ============ Account ============


class EntitlementModel(_WireModel):
    user_id: str = Field(..., alias="userId")
    has_pro_access: bool = Field(False, alias="hasProAccess")
    purchase_source: str | None = Field(None, alias="purchaseSource")
    updated_at: str | None = Field(None, alias="updatedAt")


class AccountExportResponse(_WireModel):
    user_id: str = Field(..., alias="userId")
    exported_at: str = Field(..., alias="exportedAt")
    entitlement: EntitlementModel | None = None
    sync_snapshot: SnapshotModel | None = Field(None, alias="syncSnapshot")


class AccountDeleteResponse(_WireModel):
    ok: bool = True
    user_id: str = Field(..., alias="userId")
    deleted_at: str = Field(..., alias="deletedAt")


# ============ Misc ============


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str
