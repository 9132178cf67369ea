"""
tally_ingestion.domain.types -- Pure frozen dataclasses for one import run.

ZERO I/O. Every format parser produces a ParsedDataSet built from these
records; the import service consumes it and discards it after the run.

Amount sign convention everywhere: debit positive, credit negative.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from tally_ingestion.exceptions import InvalidOptionsError


# =============================================================================
# Enums
# =============================================================================


class Nature(str, Enum):
    """Accounting classification of a group."""

    ASSET = "asset"
    LIABILITY = "liability"
    INCOME = "income"
    EXPENSE = "expense"


class VoucherKind(str, Enum):
    """Canonical voucher types every company is seeded with."""

    SALES = "Sales"
    PURCHASE = "Purchase"
    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    JOURNAL = "Journal"
    CONTRA = "Contra"
    DEBIT_NOTE = "Debit Note"
    CREDIT_NOTE = "Credit Note"


class EntityKind(str, Enum):
    """Entity kinds reported in an ImportResult, in processing order."""

    GROUPS = "groups"
    LEDGERS = "ledgers"
    STOCK_ITEMS = "stock_items"
    VOUCHERS = "vouchers"
    OPENING_BALANCES = "opening_balances"

    @property
    def result_key(self) -> str:
        """camelCase key used in the serialized result."""
        head, *rest = self.value.split("_")
        return head + "".join(part.title() for part in rest)


# =============================================================================
# Canonical records
# =============================================================================


@dataclass(frozen=True)
class Group:
    """Account group (chart-of-accounts node)."""

    name: str
    parent: str | None = None
    nature: Nature = Nature.EXPENSE


@dataclass(frozen=True)
class Ledger:
    """Ledger account under a group."""

    name: str
    group: str | None
    address: str | None = None
    state: str | None = None
    pincode: str | None = None
    gstin: str | None = None
    pan: str | None = None
    email: str | None = None
    phone: str | None = None
    opening_balance: Decimal = Decimal("0")
    is_default: bool = False


@dataclass(frozen=True)
class StockItem:
    """Inventory item with its opening position."""

    name: str
    group: str | None
    unit: str = "NOS"
    hsn_code: str | None = None
    gst_rate: Decimal | None = None
    opening_stock: Decimal = Decimal("0")
    opening_value: Decimal = Decimal("0")


@dataclass(frozen=True)
class VoucherEntry:
    """One ledger line of a voucher."""

    ledger_name: str
    amount: Decimal

    @property
    def is_debit(self) -> bool:
        return self.amount >= 0


@dataclass(frozen=True)
class Voucher:
    """Accounting transaction."""

    voucher_type: VoucherKind
    number: str | None
    date: date | None
    party: str | None = None
    narration: str = ""
    entries: tuple[VoucherEntry, ...] = ()
    total_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class OpeningBalance:
    """Opening balance derived from a ledger; never authored on its own."""

    ledger_name: str
    amount: Decimal

    @property
    def is_debit(self) -> bool:
        return self.amount >= 0

    @classmethod
    def from_ledger(cls, ledger: Ledger) -> OpeningBalance | None:
        if not ledger.opening_balance:
            return None
        return cls(ledger_name=ledger.name, amount=ledger.opening_balance)


@dataclass(frozen=True)
class UnrecognizedRow:
    """CSV row whose Type column matched no entity kind."""

    row_number: int
    type_value: str


@dataclass(frozen=True)
class ParsedDataSet:
    """Canonical result of parsing one export file, whatever its format."""

    source_format: str
    groups: tuple[Group, ...] = ()
    ledgers: tuple[Ledger, ...] = ()
    stock_items: tuple[StockItem, ...] = ()
    vouchers: tuple[Voucher, ...] = ()
    unrecognized_rows: tuple[UnrecognizedRow, ...] = ()

    @property
    def opening_balances(self) -> tuple[OpeningBalance, ...]:
        return tuple(
            ob for ob in (OpeningBalance.from_ledger(l) for l in self.ledgers)
            if ob is not None
        )

    def same_records(self, other: ParsedDataSet) -> bool:
        """True if both sets hold the same records, ignoring source format."""
        return (
            self.groups == other.groups
            and self.ledgers == other.ledgers
            and self.stock_items == other.stock_items
            and self.vouchers == other.vouchers
        )


# =============================================================================
# Request options
# =============================================================================


_OFF_WORDS = frozenset({"false", "0", "no", "off"})


def _flag(raw: Mapping[str, Any], camel: str, snake: str) -> bool:
    """Only an explicit false (or an off word) turns a kind off; null keeps the default."""
    value = raw.get(camel)
    if value is None:
        value = raw.get(snake)
    if isinstance(value, str):
        return value.strip().lower() not in _OFF_WORDS
    return value is not False


def _cap(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise InvalidOptionsError("maxVouchers", value)
    try:
        cap = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidOptionsError("maxVouchers", value) from exc
    if cap < 0:
        raise InvalidOptionsError("maxVouchers", value)
    return cap


@dataclass(frozen=True)
class ImportOptions:
    """Per-request switches. Every kind is imported unless turned off."""

    import_groups: bool = True
    import_ledgers: bool = True
    import_stock_items: bool = True
    import_vouchers: bool = True
    max_vouchers: int = 1000

    @classmethod
    def from_mapping(
        cls,
        raw: Mapping[str, Any] | None,
        default_max_vouchers: int = 1000,
    ) -> ImportOptions:
        """
        Accept camelCase (importGroups, maxVouchers) or snake_case keys.

        A missing, null, blank or zero maxVouchers means default_max_vouchers.

        Raises:
            InvalidOptionsError: maxVouchers is not a non-negative integer.
        """
        raw = raw or {}
        max_vouchers = raw.get("maxVouchers")
        if max_vouchers is None:
            max_vouchers = raw.get("max_vouchers")
        max_vouchers = _cap(max_vouchers) or default_max_vouchers
        return cls(
            import_groups=_flag(raw, "importGroups", "import_groups"),
            import_ledgers=_flag(raw, "importLedgers", "import_ledgers"),
            import_stock_items=_flag(raw, "importStockItems", "import_stock_items"),
            import_vouchers=_flag(raw, "importVouchers", "import_vouchers"),
            max_vouchers=max_vouchers,
        )
