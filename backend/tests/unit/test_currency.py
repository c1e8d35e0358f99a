"""Unit tests for currency helpers"""
import pytest

from kharcha.utils.currency import (
    CURRENCIES,
    calculate_converted_amount,
    format_amount,
    format_plain_amount,
    get_currency_by_code,
    get_exchange_rate_lookup_url,
)


class TestCurrencyTable:

    def test_codes_are_unique(self):
        codes = [c.code for c in CURRENCIES]
        assert len(codes) == len(set(codes))

    def test_lookup_by_code(self):
        inr = get_currency_by_code("INR")

        assert inr.name == "Indian Rupee"
        assert inr.symbol == "₹"

    def test_lookup_is_case_insensitive(self):
        assert get_currency_by_code("usd").code == "USD"

    @pytest.mark.parametrize("code", ["XYZ", ""])
    def test_lookup_unknown(self, code):
        assert get_currency_by_code(code) is None


class TestConversion:

    def test_rounds_to_two_decimals(self):
        assert calculate_converted_amount(100, 83.2567) == 8325.67

    def test_whole_amount(self):
        assert calculate_converted_amount(10, 2) == 20

    def test_lookup_url(self):
        assert get_exchange_rate_lookup_url("USD", "INR") == "https://www.google.com/search?q=1+USD+to+INR"


class TestFormatting:

    @pytest.mark.parametrize("amount,expected", [
        (499.0, "499"),
        (499.5, "499.5"),
        (1250.25, "1250.25"),
        (12000, "12000"),
    ])
    def test_plain_amount(self, amount, expected):
        assert format_plain_amount(amount) == expected

    def test_format_with_symbol(self):
        assert format_amount(1250.5, "INR") == "₹1,250.50"

    def test_format_whole_amount(self):
        assert format_amount(120000, "USD") == "$120,000"

    def test_format_unknown_currency_uses_code(self):
        assert format_amount(10, "XYZ") == "XYZ 10"
