"""Tests for src.core.dates — the date/time codec."""

from datetime import datetime

import pytest

from src.core.dates import format_datetime, parse_date, parse_datetime


class TestParseDatetime:
    def test_valid(self):
        assert parse_datetime("2026-03-01 09:15") == datetime(2026, 3, 1, 9, 15)

    @pytest.mark.parametrize("value", ["  2026-03-01 09:15 ", "2026-3-1 9:15", "2026-03-01 9:05", "2026-03-01  09:15"])
    def test_only_exact_form_accepted(self, value):
        assert parse_datetime(value) is None

    @pytest.mark.parametrize(
        "value",
        ["", "2026-03-01", "2026-03-01T09:15", "tomorrow 9am", "2026-02-30 10:00", "2026-03-01 25:00"],
    )
    def test_invalid_returns_none(self, value):
        assert parse_datetime(value) is None

    def test_non_string_returns_none(self):
        assert parse_datetime(None) is None
        assert parse_datetime(20260301) is None


class TestParseDate:
    def test_is_local_midnight(self):
        assert parse_date("2026-03-01") == datetime(2026, 3, 1, 0, 0)

    def test_datetime_text_rejected(self):
        assert parse_date("2026-03-01 09:00") is None

    def test_garbage_returns_none(self):
        assert parse_date("March 1st") is None

    @pytest.mark.parametrize("value", ["2026-3-1", " 2026-03-01", "2026-03-01\n"])
    def test_unpadded_or_padded_text_rejected(self, value):
        assert parse_date(value) is None


class TestFormatDatetime:
    def test_format(self):
        assert format_datetime(datetime(2026, 3, 1, 9, 5)) == "2026-03-01 09:05"

    def test_drops_seconds(self):
        assert format_datetime(datetime(2026, 3, 1, 9, 5, 59)) == "2026-03-01 09:05"

    def test_round_trip_minute_precision(self):
        for ts in (
            datetime(2026, 1, 1, 0, 0),
            datetime(2026, 12, 31, 23, 59),
            datetime(2028, 2, 29, 12, 30),
        ):
            assert parse_datetime(format_datetime(ts)) == ts
