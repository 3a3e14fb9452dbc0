"""Tests for amount and date coercion helpers."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from studio_finance.calculators.amounts import (
    month_key,
    parse_amount,
    parse_datetime,
    round_to_cents,
    sort_timestamp,
)


class TestParseAmount:
    """Stored amounts are coerced leniently."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("12.34"), Decimal("12.34")),
            (5000, Decimal("5000")),
            (0.1, Decimal("0.1")),
            ("20000", Decimal("20000")),
            (" 1,50,000 ", Decimal("150000")),
            ("-25", Decimal("-25")),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "NaN", "Infinity", True, [1], object()])
    def test_unreadable_values_are_zero(self, value):
        assert parse_amount(value) == Decimal("0")


class TestRoundToCents:
    def test_half_up(self):
        assert round_to_cents(Decimal("10.005")) == Decimal("10.01")
        assert round_to_cents(Decimal("10.004")) == Decimal("10.00")


class TestDates:
    """Date parsing and month keys."""

    def test_date_becomes_midnight(self):
        assert parse_datetime(date(2024, 1, 5)) == datetime(2024, 1, 5)

    def test_iso_string_with_z(self):
        parsed = parse_datetime("2024-01-05T10:30:00Z")

        assert parsed == datetime(2024, 1, 5, 10, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "05/01/2024", "tomorrow", 20240105])
    def test_unreadable_dates(self, value):
        assert parse_datetime(value) is None
        assert month_key(value) is None

    def test_month_key(self):
        assert month_key("2024-02-29") == (2024, 2)
        assert month_key(datetime(2023, 12, 31, 23, 59)) == (2023, 12)

    def test_month_key_uses_recorded_offset(self):
        """An event late on Jan 31 local time stays in January."""
        ist = timezone(timedelta(hours=5, minutes=30))

        assert month_key(datetime(2024, 1, 31, 23, 0, tzinfo=ist)) == (2024, 1)

    def test_sort_timestamp_mixes_aware_and_naive(self):
        aware = sort_timestamp("2024-01-05T10:00:00+05:30")
        naive = sort_timestamp(datetime(2024, 1, 5, 5, 0))

        assert aware == datetime(2024, 1, 5, 4, 30)
        assert naive > aware
