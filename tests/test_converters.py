"""Tests for ``stmtkit.converters``."""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from stmtkit.converters import apply_converters, from_json, from_utc_datetime, to_bool, to_int


class TestToBool:
    @pytest.mark.parametrize("raw,expected", [(1, True), (0, False), ("1", True), ("0", False), (b"1", True), (Decimal("0"), False)])
    def test_values(self, raw, expected):
        assert to_bool(raw) is expected

    def test_none_passes_through(self):
        assert to_bool(None) is None


class TestFromJson:
    def test_text(self):
        assert from_json('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_bytes(self):
        assert from_json(b"[1]") == [1]


class TestFromUtcDatetime:
    def test_text(self):
        assert from_utc_datetime("2024-06-01 12:30:05") == datetime(2024, 6, 1, 12, 30, 5, tzinfo=UTC)

    def test_naive_datetime(self):
        assert from_utc_datetime(datetime(2024, 6, 1, 12, 30)).tzinfo is UTC

    def test_aware_datetime_normalized(self):
        value = datetime(2024, 6, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
        result = from_utc_datetime(value)
        assert result == value
        assert result.hour == 12


def test_to_int():
    assert to_int(Decimal("12")) == 12
    assert to_int(None) is None


class TestApplyConverters:
    def test_only_registered_columns_converted(self):
        row = {"active": 1, "name": "ada"}
        assert apply_converters(row, {"active": to_bool}) == {"active": True, "name": "ada"}

    def test_does_not_mutate_row(self):
        row = {"active": 1}
        apply_converters(row, {"active": to_bool})
        assert row == {"active": 1}

    def test_null_values_skipped(self):
        assert apply_converters({"tags": None}, {"tags": from_json}) == {"tags": None}

    def test_unknown_column_ignored(self):
        assert apply_converters({"a": 1}, {"b": to_bool}) == {"a": 1}
