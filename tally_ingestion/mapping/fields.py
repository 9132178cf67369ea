"""
Field mapping: header-keyed rows -> canonical records.

Spreadsheet rows, CSV rows and flattened XML elements all arrive as
{header: value} dicts with inconsistent header spellings ("Opening Balance",
"OPENING_BALANCE", "OPENINGBALANCE"). FieldMapper resolves a canonical field
through the configured alias list; the *_from_row builders then run the
shared value normalizers so every format yields identical records.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from tally_ingestion.config.settings import ImportSettings
from tally_ingestion.domain.classifier import classify_nature, map_voucher_type
from tally_ingestion.domain.types import Group, Ledger, StockItem, Voucher, VoucherEntry
from tally_ingestion.domain.values import (
    ZERO,
    clean_text,
    parse_optional_decimal,
    parse_quantity,
    parse_signed_amount,
    parse_source_date,
)

_SEPARATORS = re.compile(r"[\s_]+")


def normalize_header(value: Any) -> str:
    """Lowercase, underscores and whitespace runs collapsed to one space."""
    if value is None:
        return ""
    return _SEPARATORS.sub(" ", str(value)).strip().lower()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class FieldMapper:
    """Looks up canonical fields in a row by any accepted header spelling."""

    def __init__(self, settings: ImportSettings):
        self._settings = settings
        self._aliases = {
            field: tuple(normalize_header(a) for a in spellings)
            for field, spellings in settings.field_aliases.items()
        }

    @property
    def settings(self) -> ImportSettings:
        return self._settings

    def normalize_row(self, row: Mapping[Any, Any]) -> dict[str, Any]:
        """Re-key a row by normalized header; first non-blank value wins."""
        normalized: dict[str, Any] = {}
        for key, value in row.items():
            header = normalize_header(key)
            if not header:
                continue
            if header not in normalized or _is_blank(normalized[header]):
                normalized[header] = value
        return normalized

    def get(self, row: Mapping[str, Any], field: str) -> Any:
        """First non-blank value among the field's aliases, else None."""
        for alias in self._aliases.get(field, (normalize_header(field),)):
            value = row.get(alias)
            if not _is_blank(value):
                return value
        return None

    def text(self, row: Mapping[str, Any], field: str) -> str | None:
        return clean_text(self.get(row, field))

    # -------------------------------------------------------------------------
    # Record builders (row must already be normalized)
    # -------------------------------------------------------------------------

    def group_from_row(self, row: Mapping[str, Any]) -> Group:
        name = self.text(row, "name") or ""
        return Group(
            name=name,
            parent=self.text(row, "parent"),
            nature=classify_nature(name),
        )

    def ledger_from_row(self, row: Mapping[str, Any]) -> Ledger:
        name = self.text(row, "name") or ""
        return Ledger(
            name=name,
            group=self.text(row, "group"),
            address=self.text(row, "address"),
            state=self.text(row, "state"),
            pincode=self.text(row, "pincode"),
            gstin=self.text(row, "gstin"),
            pan=self.text(row, "pan"),
            email=self.text(row, "email"),
            phone=self.text(row, "phone"),
            opening_balance=parse_signed_amount(self.get(row, "opening_balance")),
            is_default=name in self._settings.default_ledgers,
        )

    def stock_item_from_row(self, row: Mapping[str, Any]) -> StockItem:
        return StockItem(
            name=self.text(row, "name") or "",
            group=self.text(row, "group"),
            unit=self.text(row, "unit") or self._settings.default_unit,
            hsn_code=self.text(row, "hsn_code"),
            gst_rate=parse_optional_decimal(self.get(row, "gst_rate")),
            opening_stock=parse_quantity(self.get(row, "opening_stock")),
            opening_value=parse_signed_amount(self.get(row, "opening_value")),
        )

    def voucher_from_row(
        self,
        row: Mapping[str, Any],
        entries: tuple[VoucherEntry, ...] = (),
    ) -> Voucher:
        """
        Build a voucher. With entries the total is the sum of their absolute
        amounts; without, it is the row's own amount.
        """
        type_text = self.text(row, "voucher_type") or self.text(row, "type")
        if entries:
            total = sum((abs(e.amount) for e in entries), ZERO)
        else:
            total = parse_signed_amount(self.get(row, "amount"))
        return Voucher(
            voucher_type=map_voucher_type(type_text),
            number=self.text(row, "number"),
            date=parse_source_date(self.get(row, "date")),
            party=self.text(row, "party"),
            narration=self.text(row, "narration") or "",
            entries=entries,
            total_amount=total,
        )
