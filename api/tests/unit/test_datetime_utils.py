"""
Tests de utilidades de fechas: normalizacion UTC y formato RFC 3339.
"""
from datetime import datetime, timedelta, timezone

import pytest

from index_duel.shared.utils.datetime_utils import ensure_utc, parse_rfc3339, to_rfc3339, utc_now


def test_utc_now_is_aware_utc():
    now = utc_now()
    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)


def test_ensure_utc_treats_naive_as_utc():
    naive = datetime(2024, 3, 1, 12, 30)
    assert ensure_utc(naive) == datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)


def test_ensure_utc_converts_offsets():
    madrid = datetime(2024, 3, 1, 13, 30, tzinfo=timezone(timedelta(hours=1)))
    assert ensure_utc(madrid) == datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)


def test_to_rfc3339_uses_z_suffix_and_keeps_microseconds():
    dt = datetime(2024, 3, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)
    assert to_rfc3339(dt) == "2024-03-01T12:30:05.123456Z"


def test_to_rfc3339_without_microseconds():
    dt = datetime(2024, 3, 1, 12, 30, 5, tzinfo=timezone.utc)
    assert to_rfc3339(dt) == "2024-03-01T12:30:05Z"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2024-03-01T12:30:05Z", datetime(2024, 3, 1, 12, 30, 5, tzinfo=timezone.utc)),
        ("2024-03-01T12:30:05.250000Z", datetime(2024, 3, 1, 12, 30, 5, 250000, tzinfo=timezone.utc)),
        ("2024-03-01T14:30:05+02:00", datetime(2024, 3, 1, 12, 30, 5, tzinfo=timezone.utc)),
        ("2024-03-01T12:30:05", datetime(2024, 3, 1, 12, 30, 5, tzinfo=timezone.utc)),
    ],
)
def test_parse_rfc3339_accepts_valid_timestamps(raw, expected):
    assert parse_rfc3339(raw) == expected


def test_parse_rfc3339_output_of_to_rfc3339_is_identity():
    dt = datetime(2025, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
    assert parse_rfc3339(to_rfc3339(dt)) == dt


@pytest.mark.parametrize("raw", ["", "ayer", "2024-13-01T00:00:00Z", "12:30"])
def test_parse_rfc3339_rejects_invalid_values(raw):
    with pytest.raises(ValueError):
        parse_rfc3339(raw)
