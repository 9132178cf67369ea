"""Tests for the spreadsheet parser."""

import io
import zipfile
from datetime import date, datetime
from decimal import Decimal

import pytest

from tally_ingestion.adapters.xlsx_parser import XlsxSourceParser
from tally_ingestion.domain.types import VoucherKind
from tally_ingestion.exceptions import FatalInputError, ParseError


@pytest.fixture
def parser(settings) -> XlsxSourceParser:
    return XlsxSourceParser(settings)


class TestXlsxSheets:
    def test_sample_workbook(self, parser, sample_xlsx_bytes):
        dataset = parser.parse(io.BytesIO(sample_xlsx_bytes))
        assert dataset.source_format == "xlsx"
        assert len(dataset.groups) == 5
        assert [l.name for l in dataset.ledgers] == ["Acme Traders", "Cash"]
        assert dataset.ledgers[0].opening_balance == Decimal("1500")
        assert dataset.stock_items[0].gst_rate == Decimal("18")
        assert dataset.vouchers[0].date == date(2024, 4, 1)

    def test_missing_sheets_mean_zero_records(self, parser, make_xlsx):
        data = make_xlsx({"Ledgers": [["Name", "Group"], ["Cash", "Cash-in-Hand"]]})
        dataset = parser.parse(io.BytesIO(data))
        assert dataset.groups == () and dataset.stock_items == () and dataset.vouchers == ()
        assert len(dataset.ledgers) == 1

    def test_sheet_names_case_insensitive(self, parser, make_xlsx):
        data = make_xlsx({"stock items": [["Name", "Unit"], ["Bolt", "NOS"]]})
        assert parser.parse(io.BytesIO(data)).stock_items[0].name == "Bolt"

    def test_unrelated_sheets_ignored(self, parser, make_xlsx):
        data = make_xlsx({"Summary": [["Name"], ["Ignored"]]})
        dataset = parser.parse(io.BytesIO(data))
        assert dataset.groups == dataset.ledgers == ()

    def test_header_only_sheet(self, parser, make_xlsx):
        assert parser.parse(io.BytesIO(make_xlsx({"Groups": [["Name", "Parent"]]}))).groups == ()

    def test_blank_rows_skipped(self, parser, make_xlsx):
        data = make_xlsx(
            {"Groups": [["Name", "Parent"], ["Capital Account", None], [None, None], ["Provisions", None]]}
        )
        assert [g.name for g in parser.parse(io.BytesIO(data)).groups] == [
            "Capital Account",
            "Provisions",
        ]


class TestXlsxValues:
    def test_serial_date_cell(self, parser, make_xlsx):
        data = make_xlsx(
            {"Vouchers": [["Voucher Type", "Number", "Date", "Amount"], ["Receipt", "R-1", 45383, 250]]}
        )
        voucher = parser.parse(io.BytesIO(data)).vouchers[0]
        assert voucher.voucher_type == VoucherKind.RECEIPT
        assert voucher.date == date(2024, 4, 1)
        assert voucher.total_amount == Decimal("250")

    def test_native_date_cell(self, parser, make_xlsx):
        data = make_xlsx(
            {"Vouchers": [["Voucher Type", "Number", "Date"], ["Journal", "J-1", datetime(2024, 3, 31, 18, 0)]]}
        )
        assert parser.parse(io.BytesIO(data)).vouchers[0].date == date(2024, 3, 31)

    def test_non_numeric_amount_is_zero(self, parser, make_xlsx):
        data = make_xlsx(
            {"Ledgers": [["Name", "Group", "Opening Balance"], ["Suspense", "Suspense A/c", "n/a"]]}
        )
        assert parser.parse(io.BytesIO(data)).ledgers[0].opening_balance == Decimal("0")

    def test_dr_cr_text_cell(self, parser, make_xlsx):
        data = make_xlsx(
            {"Ledgers": [["Name", "Group", "Opening Balance"], ["Acme", "Sundry Creditors", "Cr 900"]]}
        )
        assert parser.parse(io.BytesIO(data)).ledgers[0].opening_balance == Decimal("-900")

    def test_numeric_text_fields_lose_decimal_point(self, parser, make_xlsx):
        data = make_xlsx(
            {"Ledgers": [["Name", "Group", "Pincode"], ["Acme", "Sundry Debtors", 560001.0]]}
        )
        assert parser.parse(io.BytesIO(data)).ledgers[0].pincode == "560001"


class TestXlsxErrors:
    def test_empty_is_fatal(self, parser):
        with pytest.raises(FatalInputError):
            parser.parse(io.BytesIO(b""))

    def test_not_a_workbook(self, parser):
        with pytest.raises(ParseError) as exc_info:
            parser.parse(io.BytesIO(b"Type,Name\r\nGroup,Capital\r\n"))
        assert exc_info.value.source_format == "xlsx"
        assert "re-save" in exc_info.value.hint

    def test_legacy_binary_xls(self, parser):
        ole_header = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 504
        with pytest.raises(ParseError):
            parser.parse(io.BytesIO(ole_header))

    def test_truncated_sheet(self, parser, sample_xlsx_bytes):
        # The package opens; the sheet XML only fails once rows are read
        out = io.BytesIO()
        with zipfile.ZipFile(io.BytesIO(sample_xlsx_bytes)) as src, zipfile.ZipFile(out, "w") as dst:
            for item in src.infolist():
                part = src.read(item.filename)
                if item.filename.startswith("xl/worksheets/sheet"):
                    part = part[: len(part) // 2]
                dst.writestr(item, part)
        with pytest.raises(ParseError) as exc_info:
            parser.parse(io.BytesIO(out.getvalue()))
        assert exc_info.value.source_format == "xlsx"
        assert "re-save" in exc_info.value.hint
