"""Set-reconciliation diff between persisted and incoming preset units."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PresetUnit:
    """One preset's configuration paired with its sales ledger.

    Both ``preset`` and ``sales`` are opaque to the sync subsystem and are
    compared structurally.
    """

    preset_id: str
    preset: Any
    sales: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class PresetDiff:
    """Preset ids that must be written or removed to match an incoming state."""

    upsert_ids: list[str] = field(default_factory=list)
    delete_ids: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.upsert_ids and not self.delete_ids


def _canonical(value: Any) -> Any:
    # JSON has a single number type: 7 and 7.0 must compare equal.
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    return value


def stable_serialize(value: Any) -> str:
    """Serialize to canonical JSON: sorted object keys, list order preserved."""
    return json.dumps(
        _canonical(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def units_equal(a: PresetUnit, b: PresetUnit) -> bool:
    """Structural equality of two units' preset and sales payloads."""
    return stable_serialize(a.preset) == stable_serialize(b.preset) and stable_serialize(
        a.sales
    ) == stable_serialize(b.sales)


def calculate_preset_diff(
    existing: list[PresetUnit],
    incoming: list[PresetUnit],
) -> PresetDiff:
    """Compute which preset units to upsert or delete.

    - Incoming ids absent from ``existing`` are upserted.
    - Shared ids are upserted only when the preset or its sales differ.
    - Existing ids absent from ``incoming`` are deleted.

    When ``incoming`` repeats an id, the last occurrence wins.

    Returns:
        PresetDiff; callers must not rely on the order of either list.
    """
    existing_by_id = {unit.preset_id: unit for unit in existing}
    incoming_by_id = {unit.preset_id: unit for unit in incoming}

    upsert_ids: list[str] = []
    for preset_id, incoming_unit in incoming_by_id.items():
        existing_unit = existing_by_id.get(preset_id)
        if existing_unit is None or not units_equal(existing_unit, incoming_unit):
            upsert_ids.append(preset_id)

    delete_ids = [preset_id for preset_id in existing_by_id if preset_id not in incoming_by_id]

    return PresetDiff(upsert_ids=upsert_ids, delete_ids=delete_ids)
