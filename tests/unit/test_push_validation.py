"""Tests for push payload validation and incoming-unit normalization."""

from __future__ import annotations

from typing import Any

import pytest

from calcul8tr_sync.sync.documents import build_incoming_units, preset_id_of
from calcul8tr_sync.sync.service import SyncValidationError, parse_push_payload


def _body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"presets": [], "salesByPreset": {}}
    body.update(overrides)
    return body


class TestParsePushPayload:
    def test_minimal_body(self) -> None:
        payload = parse_push_payload(_body())

        assert payload.presets == []
        assert payload.sales_by_preset == {}
        assert payload.client_version is None

    def test_full_body(self) -> None:
        payload = parse_push_payload(
            _body(
                presets=[{"id": "1", "name": "A"}, {"id": 2}],
                salesByPreset={"1": [{"id": 10, "price": 7}]},
                clientVersion=4,
            )
        )

        assert len(payload.presets) == 2
        assert payload.sales_by_preset["1"] == [{"id": 10, "price": 7}]
        assert payload.client_version == 4

    @pytest.mark.parametrize("body", [None, [], "text", 3])
    def test_body_must_be_object(self, body: Any) -> None:
        with pytest.raises(SyncValidationError, match="Request body must be an object"):
            parse_push_payload(body)

    @pytest.mark.parametrize("presets", [None, {}, "a", 1])
    def test_presets_must_be_array(self, presets: Any) -> None:
        with pytest.raises(SyncValidationError, match="'presets' must be an array"):
            parse_push_payload(_body(presets=presets))

    @pytest.mark.parametrize(
        "preset",
        ["1", 1, None, [], {"name": "no id"}, {"id": None}, {"id": True}, {"id": [1]}],
    )
    def test_each_preset_needs_an_id(self, preset: Any) -> None:
        with pytest.raises(SyncValidationError, match="containing an 'id' field"):
            parse_push_payload(_body(presets=[preset]))

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(SyncValidationError, match="Duplicate preset id '1'"):
            parse_push_payload(_body(presets=[{"id": "1"}, {"id": "1"}]))

    def test_numeric_and_string_ids_collide(self) -> None:
        with pytest.raises(SyncValidationError, match="Duplicate preset id '1'"):
            parse_push_payload(_body(presets=[{"id": 1}, {"id": "1"}]))

    @pytest.mark.parametrize("sales", [None, [], {"1": {}}, {"1": "x"}, {"1": [], "2": None}])
    def test_sales_by_preset_must_be_object_of_arrays(self, sales: Any) -> None:
        with pytest.raises(SyncValidationError, match="'salesByPreset' must be an object of arrays"):
            parse_push_payload(_body(salesByPreset=sales))

    @pytest.mark.parametrize("client_version", ["1", True, float("nan"), float("inf"), [1]])
    def test_client_version_must_be_finite_number(self, client_version: Any) -> None:
        with pytest.raises(SyncValidationError, match="'clientVersion' must be a number"):
            parse_push_payload(_body(clientVersion=client_version))

    def test_null_client_version_allowed(self) -> None:
        assert parse_push_payload(_body(clientVersion=None)).client_version is None

    def test_validation_error_is_value_error(self) -> None:
        assert issubclass(SyncValidationError, ValueError)


class TestPresetIdOf:
    @pytest.mark.parametrize(
        ("preset", "expected"),
        [
            ({"id": "abc"}, "abc"),
            ({"id": 7}, "7"),
            ({"id": 7.0}, "7"),
            ({"id": 1.5}, "1.5"),
            ({"id": -0.0}, "0"),
            ({"id": 1e20}, "100000000000000000000"),
            ({"id": 1e21}, "1e+21"),
            ({"id": 10**21}, "1e+21"),
            ({"id": 1.5e22}, "1.5e+22"),
            ({"id": 0.00001}, "0.00001"),
            ({"id": 1.5e-7}, "1.5e-7"),
            ({"id": 10**400}, None),
            ({"id": ""}, ""),
            ({"id": True}, None),
            ({"id": float("nan")}, None),
            ({}, None),
            ("7", None),
        ],
    )
    def test_preset_id_of(self, preset: Any, expected: str | None) -> None:
        assert preset_id_of(preset) == expected


class TestBuildIncomingUnits:
    def test_attaches_sales_by_stringified_id(self) -> None:
        units = build_incoming_units(
            [{"id": 1, "name": "A"}, {"id": "b"}],
            {"1": [{"id": 10}], "b": []},
        )

        assert [u.preset_id for u in units] == ["1", "b"]
        assert units[0].sales == [{"id": 10}]
        assert units[0].preset == {"id": 1, "name": "A"}

    def test_large_numeric_id_matches_exponent_sales_key(self) -> None:
        units = build_incoming_units([{"id": 1e21}], {"1e+21": [{"id": 3}]})

        assert units[0].preset_id == "1e+21"
        assert units[0].sales == [{"id": 3}]

    def test_missing_sales_default_to_empty(self) -> None:
        units = build_incoming_units([{"id": "x"}], {})
        assert units[0].sales == []

    def test_non_list_sales_default_to_empty(self) -> None:
        units = build_incoming_units([{"id": "x"}], {"x": {"not": "a list"}})
        assert units[0].sales == []

    def test_malformed_entries_dropped(self) -> None:
        units = build_incoming_units(
            [None, "str", {"name": "no id"}, {"id": False}, {"id": "ok"}],
            {},
        )

        assert [u.preset_id for u in units] == ["ok"]
