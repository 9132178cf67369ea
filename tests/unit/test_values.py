"""Tests for the shared amount / date normalizers."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tally_ingestion.domain.values import (
    clean_text,
    excel_serial_to_date,
    parse_optional_decimal,
    parse_quantity,
    parse_signed_amount,
    parse_source_date,
)


class TestParseSignedAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Dr 1000", Decimal("1000")),
            ("Cr 1000", Decimal("-1000")),
            ("dr 250.50", Decimal("250.50")),
            ("CR 75", Decimal("-75")),
            ("Dr. 10", Decimal("10")),
            ("Dr1000", Decimal("1000")),
            ("1000 Dr", Decimal("1000")),
            ("1000 Cr", Decimal("-1000")),
            ("500", Decimal("500")),
            ("-500", Decimal("-500")),
            ("1,25,000.00", Decimal("125000.00")),
            ("Cr 1,500", Decimal("-1500")),
        ],
    )
    def test_text_forms(self, raw, expected):
        assert parse_signed_amount(raw) == expected

    def test_marker_wins_over_sign(self):
        assert parse_signed_amount("Dr -40") == Decimal("40")
        assert parse_signed_amount("Cr -40") == Decimal("-40")

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "Dr", "Cr xyz", "N/A", True])
    def test_unparsable_is_zero(self, raw):
        assert parse_signed_amount(raw) == Decimal("0")

    def test_numbers_pass_through(self):
        assert parse_signed_amount(42) == Decimal("42")
        assert parse_signed_amount(-3.5) == Decimal("-3.5")
        assert parse_signed_amount(Decimal("7.25")) == Decimal("7.25")

    def test_non_finite_is_zero(self):
        assert parse_signed_amount(float("nan")) == Decimal("0")
        assert parse_signed_amount(Decimal("Infinity")) == Decimal("0")
        assert parse_signed_amount("inf") == Decimal("0")

    @given(st.decimals(min_value=0, max_value=10**12, places=2, allow_nan=False))
    def test_dr_cr_are_mirror_images(self, value):
        text = f"{value:f}"
        dr = parse_signed_amount(f"Dr {text}")
        cr = parse_signed_amount(f"Cr {text}")
        assert dr == value
        assert cr == -value
        assert dr + cr == 0

    @given(st.text(max_size=30))
    def test_never_raises(self, raw):
        assert isinstance(parse_signed_amount(raw), Decimal)


class TestQuantityAndRate:
    def test_quantity_leading_number(self):
        assert parse_quantity("10 Nos") == Decimal("10")
        assert parse_quantity(" 2.5 kg") == Decimal("2.5")
        assert parse_quantity("1,200 pcs") == Decimal("1200")
        assert parse_quantity(12) == Decimal("12")

    def test_quantity_missing(self):
        assert parse_quantity(None) == Decimal("0")
        assert parse_quantity("Nos") == Decimal("0")

    def test_rate_with_percent(self):
        assert parse_optional_decimal("18%") == Decimal("18")
        assert parse_optional_decimal(" 5 ") == Decimal("5")
        assert parse_optional_decimal(12) == Decimal("12")

    def test_rate_blank_is_none(self):
        assert parse_optional_decimal(None) is None
        assert parse_optional_decimal("") is None
        assert parse_optional_decimal("exempt") is None


class TestExcelSerial:
    def test_epoch_rule(self):
        # epoch 1899-12-31 + (serial - 1) days
        assert excel_serial_to_date(1) == date(1899, 12, 31)
        assert excel_serial_to_date(32) == date(1900, 1, 31)

    def test_no_leap_year_bug_correction(self):
        # 61 is 1900-03-01 in spreadsheets and here; 59 is 1900-02-28 there, a day early here
        assert excel_serial_to_date(61) == date(1900, 3, 1)
        assert excel_serial_to_date(59) == date(1900, 2, 27)

    def test_modern_serial(self):
        assert excel_serial_to_date(45292) == date(2024, 1, 1)
        assert excel_serial_to_date(45383) == date(2024, 4, 1)

    def test_fraction_dropped(self):
        assert excel_serial_to_date(45292.75) == date(2024, 1, 1)

    def test_below_one_is_none(self):
        assert excel_serial_to_date(0) is None
        assert excel_serial_to_date(-5) is None


class TestParseSourceDate:
    def test_yyyymmdd_explicit(self):
        assert parse_source_date("20240401") == date(2024, 4, 1)

    def test_yyyymmdd_is_never_day_first(self):
        # 2024-12-01, not 20-24-... or 1 Dec read another way
        assert parse_source_date("20241201") == date(2024, 12, 1)

    def test_invalid_yyyymmdd(self):
        assert parse_source_date("20241399") is None

    def test_iso(self):
        assert parse_source_date("2024-04-01") == date(2024, 4, 1)
        assert parse_source_date("2024-04-01T10:30:00") == date(2024, 4, 1)

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("01-04-2024", date(2024, 4, 1)),
            ("01/04/2024", date(2024, 4, 1)),
            ("1-Apr-2024", date(2024, 4, 1)),
            ("1-Apr-24", date(2024, 4, 1)),
            ("1 April 2024", date(2024, 4, 1)),
            ("2024/04/01", date(2024, 4, 1)),
        ],
    )
    def test_common_text_forms(self, raw, expected):
        assert parse_source_date(raw) == expected

    def test_native_objects_pass_through(self):
        assert parse_source_date(date(2024, 4, 1)) == date(2024, 4, 1)
        assert parse_source_date(datetime(2024, 4, 1, 9, 15)) == date(2024, 4, 1)

    def test_serial_number(self):
        assert parse_source_date(45292) == date(2024, 1, 1)

    @pytest.mark.parametrize("raw", [None, "", "yesterday", "31/31/2024", True])
    def test_unreadable_is_none(self, raw):
        assert parse_source_date(raw) is None


class TestCleanText:
    def test_strips_and_blanks(self):
        assert clean_text("  Cash  ") == "Cash"
        assert clean_text("   ") is None
        assert clean_text(None) is None

    def test_integral_float(self):
        assert clean_text(560001.0) == "560001"
        assert clean_text(2.5) == "2.5"
