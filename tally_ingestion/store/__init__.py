"""Store contracts and their SQLAlchemy / local-disk implementations."""

from tally_ingestion.store.base import (
    FileStore,
    GroupRepository,
    ImportStore,
    LedgerRepository,
    MasterRepository,
    Savepoint,
    StockItemRepository,
    VoucherRepository,
    VoucherTypeRepository,
)
from tally_ingestion.store.file_store import LocalFileStore
from tally_ingestion.store.sqlalchemy_store import SqlAlchemyImportStore, seed_voucher_types

__all__ = [
    "FileStore",
    "GroupRepository",
    "ImportStore",
    "LedgerRepository",
    "LocalFileStore",
    "MasterRepository",
    "Savepoint",
    "SqlAlchemyImportStore",
    "StockItemRepository",
    "VoucherRepository",
    "VoucherTypeRepository",
    "seed_voucher_types",
]
