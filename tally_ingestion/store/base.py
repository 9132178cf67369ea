"""
Target-store and file-store contracts consumed by the import service.

Contract:
    Every repository is scoped to one company. find_by_name() looks a record
    up by its natural key (name; for vouchers the voucher number) and returns
    None when absent. create() inserts one record from a field mapping and
    returns it; the returned object exposes at least ``id``.

    ImportStore bundles the five repositories with a savepoint factory so
    the service can isolate each record's writes.

    FileStore hands out uploaded bytes and deletes uploads best-effort.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Mapping, Protocol, runtime_checkable


@runtime_checkable
class MasterRepository(Protocol):
    """Find-or-create access to one kind of master record."""

    def find_by_name(self, name: str) -> Any | None:
        ...

    def create(self, fields: Mapping[str, Any]) -> Any:
        ...


class GroupRepository(MasterRepository, Protocol):
    """Account groups, keyed by name."""


class LedgerRepository(MasterRepository, Protocol):
    """Ledgers, keyed by name."""


class StockItemRepository(MasterRepository, Protocol):
    """Stock items, keyed by name."""


class VoucherTypeRepository(MasterRepository, Protocol):
    """Voucher types, keyed by name (Sales, Purchase, ...)."""


class VoucherRepository(MasterRepository, Protocol):
    """Vouchers, keyed by voucher number."""


class Savepoint(Protocol):
    """Nested transaction around one record's writes."""

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class ImportStore(Protocol):
    """Everything the import service writes to, for one company."""

    groups: GroupRepository
    ledgers: LedgerRepository
    stock_items: StockItemRepository
    voucher_types: VoucherTypeRepository
    vouchers: VoucherRepository

    def begin_savepoint(self) -> Savepoint:
        ...


class FileStore(Protocol):
    """Uploaded-file access. Paths, object keys, etc. are opaque refs."""

    def open(self, ref: str) -> BinaryIO:
        """Open the upload for binary reading. Must be seekable."""
        ...

    def delete(self, ref: str) -> None:
        """Remove the upload. May raise; callers treat failure as non-fatal."""
        ...
