"""Canonical text forms for hash record fields.

Every value stored in a hash record is a string. Writers use the ``format_*``
helpers; readers use the ``parse_*`` helpers, which are strict and raise
CorruptRecordError naming the offending key and field.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

from lightauth_redis.errors import CorruptRecordError

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_HEX_PATTERN = re.compile(r"(?:[0-9a-fA-F]{2})*")
_TIMESTAMP_PATTERN = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(?:Z|[+-][0-9]{2}:[0-9]{2})"
)

# Accepted boolean tokens, matching what strconv.ParseBool-style writers emit
_TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TOKENS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def format_int(value: int) -> str:
    return str(int(value))


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_hex(value: bytes | None) -> str:
    return (value or b"").hex()


def format_timestamp(value: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS±HH:MM``.

    Sub-second precision is truncated. Naive datetimes are treated as UTC.
    Offsets that are not a whole number of minutes (historical local mean
    time zones) cannot be written as ``±HH:MM``, so those values are
    converted to UTC; the instant is preserved.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    offset = value.utcoffset()
    if offset is not None and offset % timedelta(minutes=1):
        value = value.astimezone(UTC)
    return value.replace(microsecond=0).isoformat(timespec="seconds")


def parse_int(raw: str, *, key: str, field: str) -> int:
    if not _INT_PATTERN.fullmatch(raw):
        raise CorruptRecordError(
            f"{key} field {field} is not an integer: {raw!r}", key=key, field=field
        )
    return int(raw)


def parse_bool(raw: str, *, key: str, field: str) -> bool:
    if raw in _TRUE_TOKENS:
        return True
    if raw in _FALSE_TOKENS:
        return False
    raise CorruptRecordError(
        f"{key} field {field} is not a boolean: {raw!r}", key=key, field=field
    )


def parse_hex(raw: str, *, key: str, field: str) -> bytes:
    if not _HEX_PATTERN.fullmatch(raw):
        raise CorruptRecordError(
            f"{key} field {field} is not valid hex: {raw!r}", key=key, field=field
        )
    return bytes.fromhex(raw)


def parse_timestamp(raw: str, *, key: str, field: str) -> datetime:
    """Parse the fixed-width RFC 3339 form, accepting a ``Z`` suffix for UTC."""
    if not _TIMESTAMP_PATTERN.fullmatch(raw):
        raise CorruptRecordError(
            f"{key} field {field} is not a timestamp: {raw!r}", key=key, field=field
        )
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError as e:
        # Shape matched but the calendar values are out of range
        raise CorruptRecordError(
            f"{key} field {field} is not a timestamp: {raw!r}", key=key, field=field
        ) from e
