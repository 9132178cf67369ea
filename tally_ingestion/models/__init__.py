"""Target-store ORM models."""

from tally_ingestion.models.masters import (
    AccountGroupModel,
    LedgerModel,
    StockItemModel,
    VoucherEntryModel,
    VoucherModel,
    VoucherTypeModel,
)

__all__ = [
    "AccountGroupModel",
    "LedgerModel",
    "StockItemModel",
    "VoucherEntryModel",
    "VoucherModel",
    "VoucherTypeModel",
]
