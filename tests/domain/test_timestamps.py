"""Tests for UTC normalization of stored timestamps."""

from datetime import UTC, datetime, timedelta, timezone

from medstore.shared.timestamps import as_utc


def test_naive_is_taken_as_utc():
    assert as_utc(datetime(2024, 5, 1, 8, 30)) == datetime(2024, 5, 1, 8, 30, tzinfo=UTC)


def test_aware_is_converted_to_utc():
    ist = timezone(timedelta(hours=5, minutes=30))
    converted = as_utc(datetime(2024, 5, 1, 14, 0, tzinfo=ist))
    assert converted == datetime(2024, 5, 1, 8, 30, tzinfo=UTC)
    assert converted.tzinfo == UTC


def test_none_passes_through():
    assert as_utc(None) is None
