"""Persisted document shapes for the sync container."""

from __future__ import annotations

import math
import re
from decimal import Decimal
from enum import StrEnum
from typing import Any

from calcul8tr_sync.store.base import PARTITION_KEY_FIELD
from calcul8tr_sync.sync.preset_diff import PresetUnit


class DocType(StrEnum):
    """Discriminator for document kinds sharing a user's partition."""

    SYNC_PRESET = "sync_preset"
    SYNC_META = "sync_meta"


# ========== Document IDs ==========


def legacy_snapshot_id(user_id: str) -> str:
    return f"sync:{user_id}"


def preset_document_id(user_id: str, preset_id: str) -> str:
    return f"sync:preset:{user_id}:{preset_id}"


def meta_document_id(user_id: str) -> str:
    return f"sync:meta:{user_id}"


def entitlement_id(user_id: str) -> str:
    return f"entitlement:{user_id}"


# ========== Preset ids ==========


_EXPONENT_PADDING = re.compile(r"e([+-])0*(\d)")


def _number_to_id(number: int | float) -> str | None:
    """Render a numeric id the way the client's ``String(number)`` does.

    Magnitudes in ``[1e-6, 1e21)`` are written positionally without a
    trailing ``.0``; anything outside uses exponent notation (``1e+21``).
    """
    if isinstance(number, int):
        if abs(number) < 10**21:
            return str(number)
        try:
            number = float(number)
        except OverflowError:
            return None
    if not math.isfinite(number):
        return None
    if number == 0:
        return "0"
    if 1e-6 <= abs(number) < 1e21:
        return format(Decimal(repr(number)).normalize(), "f")
    return _EXPONENT_PADDING.sub(r"e\1\2", repr(number))


def preset_id_of(preset: Any) -> str | None:
    """Stringified ``id`` of a preset object, or None if it has no usable id.

    Ids may be strings or finite numbers. Numbers stringify as the client
    keys ``salesByPreset``, so ``1`` and ``1.0`` name the same preset.
    """
    if not isinstance(preset, dict):
        return None
    raw = preset.get("id")
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    return _number_to_id(raw)


def build_incoming_units(
    presets: list[Any],
    sales_by_preset: dict[str, Any],
) -> list[PresetUnit]:
    """Normalize a push payload into preset units.

    Entries that are not objects or lack a usable id are dropped. Each unit
    takes its sales from ``sales_by_preset`` under the stringified id,
    defaulting to an empty list.
    """
    units: list[PresetUnit] = []
    for preset in presets:
        preset_id = preset_id_of(preset)
        if preset_id is None:
            continue
        sales = sales_by_preset.get(preset_id)
        units.append(
            PresetUnit(
                preset_id=preset_id,
                preset=preset,
                sales=sales if isinstance(sales, list) else [],
            )
        )
    return units


# ========== Builders ==========


def build_preset_document(
    user_id: str,
    unit: PresetUnit,
    version: int,
    updated_at: str,
) -> dict[str, Any]:
    return {
        "id": preset_document_id(user_id, unit.preset_id),
        "docType": DocType.SYNC_PRESET.value,
        PARTITION_KEY_FIELD: user_id,
        "presetId": unit.preset_id,
        "preset": unit.preset,
        "sales": unit.sales,
        "version": version,
        "updatedAt": updated_at,
    }


def build_meta_document(user_id: str, version: int, updated_at: str) -> dict[str, Any]:
    return {
        "id": meta_document_id(user_id),
        "docType": DocType.SYNC_META.value,
        PARTITION_KEY_FIELD: user_id,
        "version": version,
        "updatedAt": updated_at,
    }


def build_legacy_snapshot_document(
    user_id: str,
    presets: list[Any],
    sales_by_preset: dict[str, list[Any]],
    version: int,
    updated_at: str,
) -> dict[str, Any]:
    return {
        "id": legacy_snapshot_id(user_id),
        PARTITION_KEY_FIELD: user_id,
        "presets": presets,
        "salesByPreset": sales_by_preset,
        "version": version,
        "updatedAt": updated_at,
    }


def document_to_unit(document: dict[str, Any]) -> PresetUnit:
    """Convert a persisted preset document into a PresetUnit."""
    sales = document.get("sales")
    return PresetUnit(
        preset_id=str(document.get("presetId", "")),
        preset=document.get("preset"),
        sales=sales if isinstance(sales, list) else [],
    )
