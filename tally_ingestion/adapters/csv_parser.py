"""
CSV export parser (single file, all entity kinds mixed).

Each row carries a Type column. Its value is matched case-insensitively by
substring against the bucket table below, in order, so "Stock Item" lands
in stock items and "Sales Voucher" in vouchers. Rows that match no bucket
are kept as UnrecognizedRow entries so the result can report them.

Rows are streamed; memory is bounded by the records built, not file size.
"""

from __future__ import annotations

import csv
from typing import Any, BinaryIO

from tally_ingestion.adapters.encoding import open_text_stream
from tally_ingestion.config.settings import ImportSettings, get_default_settings
from tally_ingestion.domain.types import EntityKind, ParsedDataSet, UnrecognizedRow
from tally_ingestion.exceptions import ParseError
from tally_ingestion.logging_config import get_logger
from tally_ingestion.mapping.fields import FieldMapper, normalize_header

logger = get_logger("adapters.csv")

TYPE_BUCKETS: tuple[tuple[str, EntityKind], ...] = (
    ("group", EntityKind.GROUPS),
    ("ledger", EntityKind.LEDGERS),
    ("stock", EntityKind.STOCK_ITEMS),
    ("voucher", EntityKind.VOUCHERS),
)


def bucket_for_type(type_value: str | None) -> EntityKind | None:
    needle = (type_value or "").lower()
    for pattern, kind in TYPE_BUCKETS:
        if pattern in needle:
            return kind
    return None


class CsvSourceParser:
    """Parse a mixed-kind CSV export, streaming row by row."""

    source_format = "csv"

    def __init__(self, settings: ImportSettings | None = None):
        self._settings = settings or get_default_settings()
        self._mapper = FieldMapper(self._settings)

    def parse(self, stream: BinaryIO) -> ParsedDataSet:
        mapper = self._mapper
        builders = {
            EntityKind.GROUPS: mapper.group_from_row,
            EntityKind.LEDGERS: mapper.ledger_from_row,
            EntityKind.STOCK_ITEMS: mapper.stock_item_from_row,
            EntityKind.VOUCHERS: mapper.voucher_from_row,
        }
        buckets: dict[EntityKind, list[Any]] = {kind: [] for kind in builders}
        unrecognized: list[UnrecognizedRow] = []

        text = open_text_stream(stream, fallback_encoding=self._settings.fallback_encoding)
        try:
            reader = csv.DictReader(text)
            row_number = 1
            try:
                for row_number, row in enumerate(reader, start=2):
                    normalized = mapper.normalize_row(row)
                    type_value = mapper.text(normalized, "type")
                    kind = bucket_for_type(type_value)
                    if kind is None:
                        unrecognized.append(UnrecognizedRow(row_number, type_value or ""))
                        continue
                    buckets[kind].append(builders[kind](normalized))
            except csv.Error as exc:
                raise ParseError(
                    "csv",
                    f"line {reader.line_num}: {exc}",
                    hint="malformed CSV: check quoting and delimiters",
                ) from exc
            except UnicodeDecodeError as exc:
                raise ParseError(
                    "csv",
                    f"row {row_number + 1}: {exc.reason}",
                    hint="likely encoding/BOM issue: save the export as UTF-8",
                ) from exc
            fieldnames = [normalize_header(f) for f in reader.fieldnames or ()]
        finally:
            text.detach()

        if "type" not in fieldnames:
            logger.warning("csv_type_column_missing", extra={"columns": fieldnames})
        if unrecognized:
            logger.warning(
                "csv_rows_unrecognized",
                extra={
                    "count": len(unrecognized),
                    "types": sorted({u.type_value for u in unrecognized})[:20],
                },
            )

        dataset = ParsedDataSet(
            source_format=self.source_format,
            groups=tuple(buckets[EntityKind.GROUPS]),
            ledgers=tuple(buckets[EntityKind.LEDGERS]),
            stock_items=tuple(buckets[EntityKind.STOCK_ITEMS]),
            vouchers=tuple(buckets[EntityKind.VOUCHERS]),
            unrecognized_rows=tuple(unrecognized),
        )
        logger.info(
            "csv_parsed",
            extra={
                "rows": row_number - 1,
                "groups": len(dataset.groups),
                "ledgers": len(dataset.ledgers),
                "stock_items": len(dataset.stock_items),
                "vouchers": len(dataset.vouchers),
                "unrecognized_rows": len(unrecognized),
            },
        )
        return dataset
