"""Tests for date and amount parsing utilities."""

from datetime import date, datetime
from decimal import Decimal
import pytest

from checkbook.domain.errors import ValidationError
from checkbook.utils.amount_parser import parse_amount, require_money, require_positive_amount
from checkbook.utils.date_parser import get_date_range, parse_date, parse_iso_date

TODAY = date(2024, 3, 15)


class TestParseIsoDate:
    def test_string(self):
        assert parse_iso_date("2024-02-29") == date(2024, 2, 29)

    def test_date_passthrough(self):
        assert parse_iso_date(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_datetime_truncated(self):
        assert parse_iso_date(datetime(2024, 1, 1, 23, 59)) == date(2024, 1, 1)

    @pytest.mark.parametrize("value", ["2023-02-29", "2024-1-5", "15/01/2024", "today", "", None])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_iso_date(value)

    def test_field_name_in_message(self):
        with pytest.raises(ValidationError, match="start_date"):
            parse_iso_date("nope", "start_date")


class TestParseDate:
    def test_absolute(self):
        assert parse_date("2024-01-15", today=TODAY) == date(2024, 1, 15)

    def test_relative(self):
        assert parse_date("yesterday", today=TODAY) == date(2024, 3, 14)
        assert parse_date("last month", today=TODAY) == date(2024, 2, 1)
        assert parse_date("this year", today=TODAY) == date(2024, 1, 1)

    def test_unparseable(self):
        with pytest.raises(ValidationError):
            parse_date("not a date", today=TODAY)


class TestDateRange:
    def test_last_month(self):
        assert get_date_range("last-month", today=TODAY) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_this_week(self):
        # 2024-03-15 is a Friday
        assert get_date_range("this-week", today=TODAY) == (date(2024, 3, 11), TODAY)

    def test_unknown(self):
        with pytest.raises(ValidationError):
            get_date_range("next-decade", today=TODAY)


class TestAmounts:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("123.45", Decimal("123.45")),
            ("$1,234.50", Decimal("1234.50")),
            ("(12.00)", Decimal("-12.00")),
            ("-3", Decimal("-3")),
        ],
    )
    def test_parse_amount(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "NaN", "inf"])
    def test_parse_amount_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_amount(text)

    def test_positive_amount_quantized(self):
        assert str(require_positive_amount("5")) == "5.00"

    def test_positive_amount_rejects_float(self):
        with pytest.raises(ValidationError):
            require_positive_amount(0.1)

    def test_money_allows_negative(self):
        assert require_money("-20.5") == Decimal("-20.50")

    def test_money_rejects_bool(self):
        with pytest.raises(ValidationError, match="bool"):
            require_money(True)

    @pytest.mark.parametrize("text", ["1e30", "12345678901234567.89", "10000000000000"])
    def test_amount_too_large(self, text):
        with pytest.raises(ValidationError, match="too large"):
            require_positive_amount(text)

    def test_largest_storable_amount(self):
        assert require_money("-9999999999999.99") == Decimal("-9999999999999.99")
