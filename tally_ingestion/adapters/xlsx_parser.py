"""
Spreadsheet (.xlsx / .xls) export parser.

One sheet per entity kind (names from settings.sheets, matched
case-insensitively): Groups, Ledgers, Stock Items, Vouchers. A missing sheet
means zero records of that kind. Row 1 is the header; fully blank rows are
skipped. Only OOXML workbooks are readable; a legacy binary .xls raises
ParseError.
"""

from __future__ import annotations

import io
import re
import zipfile
from xml.etree import ElementTree
from typing import Any, BinaryIO, Iterator

import openpyxl
from lxml import etree
from openpyxl.utils.exceptions import InvalidFileException

from tally_ingestion.config.settings import ImportSettings, get_default_settings
from tally_ingestion.domain.types import EntityKind, ParsedDataSet
from tally_ingestion.exceptions import FatalInputError, ParseError
from tally_ingestion.logging_config import get_logger
from tally_ingestion.mapping.fields import FieldMapper

logger = get_logger("adapters.xlsx")

_CORRUPT_HINT = "not a readable .xlsx workbook: re-save it as Excel Workbook (.xlsx) and upload again"
_PACKAGE_ERRORS = (
    zipfile.BadZipFile,
    InvalidFileException,
    ElementTree.ParseError,
    etree.XMLSyntaxError,
    KeyError,
)


def _normalize_header_cell(value: Any) -> str:
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()


def _cell_value(value: Any) -> Any:
    """Integral floats become int, strings are stripped, blanks become None."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return value.strip() or None
    return value


def _sheet_rows(sheet: Any) -> Iterator[dict[str, Any]]:
    rows = sheet.iter_rows(values_only=True)
    header_row = next(rows, None)
    if header_row is None:
        return
    headers: list[str] = []
    for c, value in enumerate(header_row):
        key = _normalize_header_cell(value) or f"Column_{c + 1}"
        base = key
        cnt = 0
        while key in headers:
            cnt += 1
            key = f"{base}_{cnt}"
        headers.append(key)

    for row in rows:
        vals = [_cell_value(v) for v in row[: len(headers)]]
        if not any(v is not None for v in vals):
            continue
        yield dict(zip(headers, vals))


class XlsxSourceParser:
    """Parse a workbook with one sheet per entity kind."""

    source_format = "xlsx"

    def __init__(self, settings: ImportSettings | None = None):
        self._settings = settings or get_default_settings()
        self._mapper = FieldMapper(self._settings)

    def parse(self, stream: BinaryIO) -> ParsedDataSet:
        data = stream.read()
        if not data:
            raise FatalInputError("empty or corrupted file")
        try:
            wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except _PACKAGE_ERRORS + (OSError,) as exc:
            raise ParseError("xlsx", str(exc) or type(exc).__name__, hint=_CORRUPT_HINT) from exc

        try:
            mapper = self._mapper
            rows = {
                kind: [mapper.normalize_row(r) for r in self._rows(wb, kind)]
                for kind in (
                    EntityKind.GROUPS,
                    EntityKind.LEDGERS,
                    EntityKind.STOCK_ITEMS,
                    EntityKind.VOUCHERS,
                )
            }
        except _PACKAGE_ERRORS as exc:
            # Sheet parts are only read while iterating rows
            raise ParseError("xlsx", str(exc) or type(exc).__name__, hint=_CORRUPT_HINT) from exc
        finally:
            wb.close()

        dataset = ParsedDataSet(
            source_format=self.source_format,
            groups=tuple(mapper.group_from_row(r) for r in rows[EntityKind.GROUPS]),
            ledgers=tuple(mapper.ledger_from_row(r) for r in rows[EntityKind.LEDGERS]),
            stock_items=tuple(
                mapper.stock_item_from_row(r) for r in rows[EntityKind.STOCK_ITEMS]
            ),
            vouchers=tuple(mapper.voucher_from_row(r) for r in rows[EntityKind.VOUCHERS]),
        )
        logger.info(
            "xlsx_parsed",
            extra={
                "sheets": list(wb.sheetnames),
                "groups": len(dataset.groups),
                "ledgers": len(dataset.ledgers),
                "stock_items": len(dataset.stock_items),
                "vouchers": len(dataset.vouchers),
            },
        )
        return dataset

    def _rows(self, wb: Any, kind: EntityKind) -> Iterator[dict[str, Any]]:
        wanted = self._settings.sheet_name(kind.value)
        for name in wb.sheetnames:
            if name.strip().lower() == wanted.lower():
                return _sheet_rows(wb[name])
        logger.debug("sheet_missing", extra={"sheet": wanted})
        return iter(())
