"""Pure domain types and normalizers (no I/O)."""

from tally_ingestion.domain.classifier import classify_nature, map_voucher_type
from tally_ingestion.domain.results import (
    ImportResult,
    ImportSummary,
    KindResult,
    KindTally,
    RecordError,
)
from tally_ingestion.domain.types import (
    EntityKind,
    Group,
    ImportOptions,
    Ledger,
    Nature,
    OpeningBalance,
    ParsedDataSet,
    StockItem,
    UnrecognizedRow,
    Voucher,
    VoucherEntry,
    VoucherKind,
)
from tally_ingestion.domain.values import (
    excel_serial_to_date,
    parse_signed_amount,
    parse_source_date,
)

__all__ = [
    "EntityKind",
    "Group",
    "ImportOptions",
    "ImportResult",
    "ImportSummary",
    "KindResult",
    "KindTally",
    "Ledger",
    "Nature",
    "OpeningBalance",
    "ParsedDataSet",
    "RecordError",
    "StockItem",
    "UnrecognizedRow",
    "Voucher",
    "VoucherEntry",
    "VoucherKind",
    "classify_nature",
    "excel_serial_to_date",
    "map_voucher_type",
    "parse_signed_amount",
    "parse_source_date",
]
