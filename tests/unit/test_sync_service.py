"""Tests for the push/pull service layer."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from calcul8tr_sync.sync.repository import IncrementalSyncResult, SyncRepository, SyncSnapshot
from calcul8tr_sync.sync.service import SyncPushPayload, SyncService, parse_push_payload

USER = "user-1"


def _payload(
    presets: list[dict[str, Any]],
    sales: dict[str, list[Any]] | None = None,
    client_version: float | None = None,
) -> SyncPushPayload:
    return SyncPushPayload(presets=presets, sales_by_preset=sales or {}, client_version=client_version)


class TestPull:
    @pytest.mark.asyncio
    async def test_default_empty_snapshot(self, service: SyncService) -> None:
        result = await service.pull(USER)

        assert result == {
            "userId": USER,
            "snapshot": {"presets": [], "salesByPreset": {}, "version": 0, "updatedAt": None},
        }


class TestPush:
    @pytest.mark.asyncio
    async def test_fresh_user_push_then_pull(self, service: SyncService) -> None:
        push = await service.push(
            USER,
            parse_push_payload(
                {
                    "presets": [{"id": "1", "name": "A"}],
                    "salesByPreset": {"1": [{"id": 10, "price": 7}]},
                    "clientVersion": 0,
                }
            ),
        )

        assert push == {
            "ok": True,
            "userId": USER,
            "version": 1,
            "updatedAt": "2026-03-01T12:00:00.000Z",
            "changed": True,
            "upsertedCount": 1,
            "deletedCount": 0,
        }

        pulled = (await service.pull(USER))["snapshot"]
        assert pulled["presets"] == [{"id": "1", "name": "A"}]
        assert pulled["salesByPreset"]["1"] == [{"id": 10, "price": 7}]
        assert pulled["version"] == 1

    @pytest.mark.asyncio
    async def test_delete_everything(self, service: SyncService) -> None:
        await service.push(USER, _payload([{"id": "1", "name": "A"}], client_version=0))

        push = await service.push(USER, _payload([], client_version=1))

        assert push["changed"] is True
        assert push["upsertedCount"] == 0
        assert push["deletedCount"] == 1
        assert push["version"] == 2
        assert (await service.pull(USER))["snapshot"]["presets"] == []

    @pytest.mark.asyncio
    async def test_idempotent_repush(self, service: SyncService) -> None:
        payload = _payload([{"id": 1, "name": "A"}], {"1": [{"id": 10}]}, client_version=0)
        first = await service.push(USER, payload)

        second = await service.push(USER, payload)

        assert second == {
            "ok": True,
            "userId": USER,
            "version": first["version"],
            "updatedAt": first["updatedAt"],
            "changed": False,
        }
        assert (await service.pull(USER))["snapshot"]["version"] == first["version"]

    @pytest.mark.asyncio
    async def test_versions_increase_per_change(self, service: SyncService) -> None:
        versions = []
        for price in (7, 8, 9):
            result = await service.push(USER, _payload([{"id": 1, "price": price}]))
            versions.append(result["version"])

        assert versions == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_client_ahead_of_server(self, service: SyncService) -> None:
        result = await service.push(USER, _payload([{"id": 1}], client_version=41.7))

        assert result["version"] == 42

    @pytest.mark.asyncio
    async def test_empty_push_for_fresh_user_is_noop(self, service: SyncService) -> None:
        result = await service.push(USER, _payload([], client_version=3))

        assert result == {
            "ok": True,
            "userId": USER,
            "version": 0,
            "updatedAt": None,
            "changed": False,
        }

    @pytest.mark.asyncio
    async def test_legacy_user_migrates_on_first_push(
        self, repository: SyncRepository, service: SyncService
    ) -> None:
        await repository.upsert_legacy_snapshot(
            USER, [{"id": "1"}], {"1": []}, version=9, updated_at="2025-12-31T00:00:00.000Z"
        )

        result = await service.push(USER, _payload([{"id": "1"}, {"id": "2"}]))

        assert result["version"] == 10
        assert result["upsertedCount"] == 2
        snapshot = (await service.pull(USER))["snapshot"]
        assert snapshot["version"] == 10
        assert [p["id"] for p in snapshot["presets"]] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_passes_version_and_timestamp_to_repository(self, clock: Any) -> None:
        repository = AsyncMock(spec=SyncRepository)
        repository.get_effective_snapshot = AsyncMock(
            return_value=SyncSnapshot(version=4, updated_at="2026-01-01T00:00:00.000Z")
        )
        repository.apply_incremental_sync = AsyncMock(
            return_value=IncrementalSyncResult(changed=True, upserted_count=1)
        )
        service = SyncService(repository, clock=clock)

        result = await service.push(USER, _payload([{"id": "a"}], {"a": [1]}, client_version=2))

        repository.apply_incremental_sync.assert_awaited_once_with(
            USER, [{"id": "a"}], {"a": [1]}, 5, "2026-03-01T12:00:00.000Z"
        )
        assert result["version"] == 5
