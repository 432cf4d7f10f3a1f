"""Tests for the monotonic version policy."""

from __future__ import annotations

import math
from typing import Any

import pytest

from calcul8tr_sync.sync.versioning import coerce_version, next_version


class TestNextVersion:
    def test_fresh_user(self) -> None:
        assert next_version(0, 0) == 1

    def test_server_ahead(self) -> None:
        assert next_version(5, 2) == 6

    def test_client_ahead(self) -> None:
        """A client that saw local-only edits pushes the version past its own."""
        assert next_version(3, 10) == 11

    def test_fractional_client_version_floored(self) -> None:
        assert next_version(0, 4.9) == 5

    @pytest.mark.parametrize("client", [None, math.nan, math.inf, -math.inf, "7", True])
    def test_unusable_client_version_counts_as_zero(self, client: Any) -> None:
        assert next_version(2, client) == 3

    def test_missing_previous_version(self) -> None:
        assert next_version(None, None) == 1

    @pytest.mark.parametrize("previous", [0, 1, 7, 1000])
    @pytest.mark.parametrize("client", [-3, -0.5, 0, 0.5, 6, 7, 8.25, 2000])
    def test_strictly_exceeds_both_inputs(self, previous: int, client: float) -> None:
        result = next_version(previous, client)

        assert result > previous
        assert result > client


class TestCoerceVersion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(3, 3), (3.0, 3), (None, 0), ("4", 0), (False, 0), (math.nan, 0)],
    )
    def test_coercion(self, raw: Any, expected: int) -> None:
        assert coerce_version(raw) == expected
