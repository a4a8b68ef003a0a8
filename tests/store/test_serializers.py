"""Tests for JSON column helpers."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from influencerflow.domain.errors import InfluencerFlowError
from influencerflow.store.serializers import (
    decode_row,
    dump_json,
    load_json,
    new_id,
    now_iso,
    require_row,
)


class TestDumpJson:
    def test_integral_decimal_becomes_int(self) -> None:
        assert json.loads(dump_json({"rate": Decimal("1500")})) == {"rate": 1500}

    def test_fractional_decimal_becomes_float(self) -> None:
        assert json.loads(dump_json([Decimal("12.5")])) == [12.5]


class TestLoadJson:
    def test_null_and_empty_return_default(self) -> None:
        assert load_json(None, default={}) == {}
        assert load_json("", default=[]) == []

    def test_invalid_text_returns_default(self) -> None:
        assert load_json("{not json", default=None) is None


class TestDecodeRow:
    def test_decodes_json_and_bool_columns(self) -> None:
        row = {"terms": '{"a": 1}', "delivered": 1, "read": 0, "other": "x"}
        decoded = decode_row(row, json_columns=("terms",), bool_columns=("delivered", "read"))
        assert decoded == {"terms": {"a": 1}, "delivered": True, "read": False, "other": "x"}

    def test_none_passes_through(self) -> None:
        assert decode_row(None, json_columns=("terms",)) is None


class TestRequireRow:
    def test_returns_row(self) -> None:
        row = {"id": "m1"}
        assert require_row(row, "messages", "m1") is row

    def test_missing_row_is_internal_error(self) -> None:
        with pytest.raises(InfluencerFlowError, match="messages row m1 is missing") as exc_info:
            require_row(None, "messages", "m1")
        assert exc_info.value.status_code == 500


def test_now_iso_is_utc_with_microseconds() -> None:
    stamp = now_iso()
    assert stamp.endswith("Z")
    assert "." in stamp


def test_new_id_is_unique() -> None:
    assert new_id() != new_id()
