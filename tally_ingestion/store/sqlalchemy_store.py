"""
SQLAlchemy implementation of the import store.

Repositories filter every query by company_id and stamp it on every insert.
create() adds and flushes so the new row's id is available to later records
in the same run (a ledger created right after its group). The caller owns
the outer transaction; begin_savepoint() maps to Session.begin_nested().
"""

from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from tally_ingestion.domain.types import VoucherKind
from tally_ingestion.logging_config import get_logger
from tally_ingestion.models.masters import (
    AccountGroupModel,
    LedgerModel,
    StockItemModel,
    VoucherEntryModel,
    VoucherModel,
    VoucherTypeModel,
)

logger = get_logger("store.sqlalchemy")


class _CompanyScopedRepository:
    model: Any = None
    key_column = "name"

    def __init__(self, session: Session, company_id: UUID, actor_id: UUID | None = None):
        self._session = session
        self._company_id = company_id
        self._actor_id = actor_id

    def find_by_name(self, name: str) -> Any | None:
        if not name:
            return None
        stmt = select(self.model).where(
            self.model.company_id == self._company_id,
            getattr(self.model, self.key_column) == name,
        )
        return self._session.scalars(stmt).first()

    def create(self, fields: Mapping[str, Any]) -> Any:
        row = self.model(
            company_id=self._company_id,
            created_by_id=self._actor_id,
            **fields,
        )
        self._session.add(row)
        self._session.flush()
        return row


class SqlAlchemyGroupRepository(_CompanyScopedRepository):
    model = AccountGroupModel


class SqlAlchemyLedgerRepository(_CompanyScopedRepository):
    model = LedgerModel


class SqlAlchemyStockItemRepository(_CompanyScopedRepository):
    model = StockItemModel


class SqlAlchemyVoucherTypeRepository(_CompanyScopedRepository):
    model = VoucherTypeModel


class SqlAlchemyVoucherRepository(_CompanyScopedRepository):
    model = VoucherModel
    key_column = "voucher_number"

    def create(self, fields: Mapping[str, Any]) -> Any:
        fields = dict(fields)
        entries = fields.pop("entries", ())
        voucher = VoucherModel(
            company_id=self._company_id,
            created_by_id=self._actor_id,
            **fields,
        )
        voucher.entries = [
            VoucherEntryModel(created_by_id=self._actor_id, **entry) for entry in entries
        ]
        self._session.add(voucher)
        self._session.flush()
        return voucher


class SqlAlchemyImportStore:
    """All repositories for one company, sharing one session."""

    def __init__(self, session: Session, company_id: UUID, actor_id: UUID | None = None):
        self.session = session
        self.company_id = company_id
        self.groups = SqlAlchemyGroupRepository(session, company_id, actor_id)
        self.ledgers = SqlAlchemyLedgerRepository(session, company_id, actor_id)
        self.stock_items = SqlAlchemyStockItemRepository(session, company_id, actor_id)
        self.voucher_types = SqlAlchemyVoucherTypeRepository(session, company_id, actor_id)
        self.vouchers = SqlAlchemyVoucherRepository(session, company_id, actor_id)

    def begin_savepoint(self):
        return self.session.begin_nested()


def seed_voucher_types(
    session: Session,
    company_id: UUID,
    actor_id: UUID | None = None,
) -> int:
    """Create any missing standard voucher types for a company. Returns count created."""
    repo = SqlAlchemyVoucherTypeRepository(session, company_id, actor_id)
    created = 0
    for kind in VoucherKind:
        if repo.find_by_name(kind.value) is None:
            repo.create({"name": kind.value})
            created += 1
    if created:
        logger.info(
            "voucher_types_seeded",
            extra={"company_id": str(company_id), "created_count": created},
        )
    return created
