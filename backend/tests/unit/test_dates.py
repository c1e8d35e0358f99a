"""Unit tests for date helpers"""
import pytest
from datetime import date, datetime

from kharcha.utils.dates import (
    day_window,
    month_key,
    month_window,
    parse_iso_date,
    parse_month,
    shift_month,
    tomorrow_window,
)


class TestWindows:

    def test_day_window(self):
        start, end = day_window(date(2024, 3, 31))

        assert start == datetime(2024, 3, 31)
        assert end == datetime(2024, 4, 1)

    def test_tomorrow_window_crosses_year(self):
        start, end = tomorrow_window(datetime(2024, 12, 31, 9, 0))

        assert start == datetime(2025, 1, 1)
        assert end == datetime(2025, 1, 2)

    def test_month_window_december(self):
        start, end = month_window("2024-12")

        assert start == datetime(2024, 12, 1)
        assert end == datetime(2025, 1, 1)


class TestMonths:

    def test_parse_month(self):
        assert parse_month("2024-07") == (2024, 7)

    @pytest.mark.parametrize("value", ["2024-13", "2024", "july", "2024-00"])
    def test_parse_month_invalid(self, value):
        with pytest.raises(ValueError):
            parse_month(value)

    def test_month_key(self):
        assert month_key(datetime(2024, 2, 5)) == "2024-02"

    def test_shift_month_backwards_over_year(self):
        assert shift_month(2024, 1, -1) == (2023, 12)
        assert shift_month(2024, 11, 3) == (2025, 2)


class TestParseIsoDate:

    def test_iso_string(self):
        assert parse_iso_date("2024-05-01") == date(2024, 5, 1)

    def test_iso_datetime_string(self):
        assert parse_iso_date("2024-05-01T10:30:00") == date(2024, 5, 1)

    def test_datetime_value(self):
        assert parse_iso_date(datetime(2024, 5, 1, 8)) == date(2024, 5, 1)

    @pytest.mark.parametrize("value", [None, "", "not-a-date"])
    def test_missing_or_invalid(self, value):
        assert parse_iso_date(value) is None
