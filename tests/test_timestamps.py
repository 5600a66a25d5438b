"""Unit tests for timestamp resolution."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from services.timestamps import format_label, resolve_timestamp


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_none_and_blank_values_resolve_to_none() -> None:
    assert resolve_timestamp(None) is None
    assert resolve_timestamp("") is None
    assert resolve_timestamp("   ") is None
    assert resolve_timestamp(True) is None
    assert resolve_timestamp({"ts": 1}) is None


def test_millisecond_epoch_above_1e12() -> None:
    assert resolve_timestamp(1_704_067_200_000) == _utc(2024, 1, 1)


def test_second_epoch_at_or_below_1e9_is_scaled() -> None:
    assert resolve_timestamp(86_400) == _utc(1970, 1, 2)
    assert resolve_timestamp(1_000_000_000) == _utc(2001, 9, 9, 1, 46, 40)


def test_values_between_1e9_and_1e12_are_read_as_milliseconds() -> None:
    # 1_704_067_200 is 2024-01-01 in seconds, but this band is read as milliseconds.
    assert resolve_timestamp(1_704_067_200) == _utc(1970, 1, 20, 17, 21, 7, 200000)


def test_numeric_strings_follow_numeric_rules() -> None:
    assert resolve_timestamp("1704067200000") == _utc(2024, 1, 1)
    assert resolve_timestamp(" 86400 ") == _utc(1970, 1, 2)
    assert resolve_timestamp("8.64e4") == _utc(1970, 1, 2)


def test_non_finite_numbers_resolve_to_none() -> None:
    assert resolve_timestamp(float("nan")) is None
    assert resolve_timestamp(float("inf")) is None
    assert resolve_timestamp(1e300) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-01-01T00:00:00Z", _utc(2024, 1, 1)),
        ("2024-01-01T02:00:00+02:00", _utc(2024, 1, 1)),
        ("2024-01-01 12:30:00", _utc(2024, 1, 1, 12, 30)),
        ("Jan 5 2024 10:00", _utc(2024, 1, 5, 10)),
    ],
)
def test_date_strings_are_parsed(raw: str, expected: datetime) -> None:
    assert resolve_timestamp(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["not a date", "2024-01-01T10:00:00+25:00", "10:00 +99:00"],
)
def test_unparseable_strings_resolve_to_none(raw: str) -> None:
    assert resolve_timestamp(raw) is None


def test_integers_too_large_for_a_float_resolve_to_none() -> None:
    assert resolve_timestamp(10**400) is None
    assert resolve_timestamp(-(10**400)) is None


def test_missing_date_parts_come_from_the_epoch() -> None:
    assert resolve_timestamp("10:00") == _utc(1970, 1, 1, 10)


def test_resolution_is_monotonic_within_each_epoch_band() -> None:
    seconds = [0, 10, 500_000_000, 999_999_999]
    millis = [1_000_000_001, 5_000_000_000, 1_700_000_000_000, 1_800_000_000_000]
    for band in (seconds, millis):
        resolved = [resolve_timestamp(value) for value in band]
        assert resolved == sorted(resolved)


def test_format_label_uses_utc_iso_with_milliseconds() -> None:
    assert format_label(_utc(2024, 1, 1, 5, 6, 7, 890000)) == "2024-01-01T05:06:07.890Z"
