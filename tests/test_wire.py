"""Tests for hash field text encoding."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from lightauth_redis.errors import CorruptRecordError
from lightauth_redis.graph.wire import (
    format_bool,
    format_hex,
    format_int,
    format_timestamp,
    parse_bool,
    parse_hex,
    parse_int,
    parse_timestamp,
)

KEY = "Invoice:abc"


class TestIntegers:
    def test_format(self):
        assert format_int(10) == "10"
        assert format_int(-3) == "-3"

    @pytest.mark.parametrize("raw,expected", [("10", 10), ("-3", -3), ("+7", 7)])
    def test_parse(self, raw, expected):
        assert parse_int(raw, key=KEY, field="Fee") == expected

    @pytest.mark.parametrize("raw", ["", "ten", "1.5", " 1", "1_000", "0x10"])
    def test_parse_rejects_non_decimal(self, raw):
        with pytest.raises(CorruptRecordError) as exc_info:
            parse_int(raw, key=KEY, field="Fee")
        assert exc_info.value.key == KEY
        assert exc_info.value.field == "Fee"


class TestBooleans:
    def test_format_uses_literal_tokens(self):
        assert format_bool(True) == "true"
        assert format_bool(False) == "false"

    @pytest.mark.parametrize("raw", ["true", "True", "TRUE", "t", "1"])
    def test_parse_true(self, raw):
        assert parse_bool(raw, key=KEY, field="Settled") is True

    @pytest.mark.parametrize("raw", ["false", "False", "FALSE", "f", "0"])
    def test_parse_false(self, raw):
        assert parse_bool(raw, key=KEY, field="Settled") is False

    @pytest.mark.parametrize("raw", ["", "yes", "no", "tRuE", "2"])
    def test_parse_rejects_unknown_tokens(self, raw):
        with pytest.raises(CorruptRecordError):
            parse_bool(raw, key=KEY, field="Settled")


class TestHex:
    def test_format_is_lowercase(self):
        assert format_hex(b"\xde\xad") == "dead"

    def test_format_empty(self):
        assert format_hex(b"") == ""

    def test_parse_accepts_either_case(self):
        assert parse_hex("DEAD", key=KEY, field="PaymentHash") == b"\xde\xad"
        assert parse_hex("beef", key=KEY, field="PreImage") == b"\xbe\xef"

    @pytest.mark.parametrize("raw", ["abc", "zz", "de ad", "0xdead"])
    def test_parse_rejects_invalid(self, raw):
        with pytest.raises(CorruptRecordError):
            parse_hex(raw, key=KEY, field="PaymentHash")


class TestTimestamps:
    def test_format_utc_with_numeric_offset(self):
        value = datetime(2024, 1, 1, tzinfo=UTC)
        assert format_timestamp(value) == "2024-01-01T00:00:00+00:00"

    def test_format_preserves_offset(self):
        offset = timezone(timedelta(hours=5, minutes=30))
        value = datetime(2024, 1, 1, 9, 30, tzinfo=offset)
        assert format_timestamp(value) == "2024-01-01T09:30:00+05:30"

    def test_format_truncates_subseconds(self):
        value = datetime(2024, 1, 1, 0, 0, 0, 999999, tzinfo=UTC)
        assert format_timestamp(value) == "2024-01-01T00:00:00+00:00"

    def test_format_treats_naive_as_utc(self):
        assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00+00:00"

    def test_parse_numeric_offset(self):
        parsed = parse_timestamp(
            "2024-01-01T09:30:00+05:30", key=KEY, field="ExpirationTime"
        )
        assert parsed.utcoffset() == timedelta(hours=5, minutes=30)
        assert parsed == datetime(2024, 1, 1, 4, 0, tzinfo=UTC)

    def test_parse_z_suffix(self):
        parsed = parse_timestamp(
            "2024-01-01T00:00:00Z", key=KEY, field="ExpirationTime"
        )
        assert parsed == datetime(2024, 1, 1, tzinfo=UTC)

    def test_roundtrip_keeps_offset(self):
        value = datetime(2024, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=-7)))
        parsed = parse_timestamp(format_timestamp(value), key=KEY, field="T")
        assert parsed == value
        assert parsed.utcoffset() == value.utcoffset()

    @pytest.mark.parametrize(
        "offset",
        [
            timedelta(hours=5, minutes=30, seconds=15),
            # Europe/Amsterdam local mean time
            timedelta(minutes=19, seconds=32),
            -timedelta(hours=4, minutes=56, seconds=2),
        ],
    )
    def test_sub_minute_offset_is_written_as_utc(self, offset):
        value = datetime(1800, 1, 1, tzinfo=timezone(offset))
        raw = format_timestamp(value)

        assert raw.endswith("+00:00")
        assert len(raw) == len("1800-01-01T00:00:00+00:00")
        parsed = parse_timestamp(raw, key=KEY, field="T")
        assert parsed == value

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "2024-01-01",
            "2024-01-01T00:00:00",
            "2024-01-01T00:00:00.5+00:00",
            "2024-01-01 00:00:00+00:00",
            "2024-13-01T00:00:00+00:00",
            "yesterday",
        ],
    )
    def test_parse_rejects_invalid(self, raw):
        with pytest.raises(CorruptRecordError):
            parse_timestamp(raw, key=KEY, field="ExpirationTime")
