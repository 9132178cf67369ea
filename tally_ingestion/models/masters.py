"""
Module: tally_ingestion.models.masters
Responsibility: ORM persistence for the accounting masters an import writes:
    account groups, ledgers, stock items, voucher types and vouchers.
Architecture position: Models.  May import from db/base.py only.

Invariants enforced:
    Every row belongs to exactly one company (company_id).  Natural keys are
    unique per company: name for groups, ledgers, stock items and voucher
    types; voucher_number for vouchers.  These constraints are the final
    backstop when two imports race on the same key.

Failure modes:
    - IntegrityError on a duplicate natural key within a company.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tally_ingestion.db.base import TrackedBase, UUIDString


class AccountGroupModel(TrackedBase):
    """
    Chart-of-accounts group (Tally "Group").

    Guarantees:
        - (company_id, name) is unique.
        - nature is one of asset / liability / income / expense.
        - parent_id may be null (primary group or unresolved parent).
    """

    __tablename__ = "account_groups"

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_account_group_company_name"),
        Index("idx_account_group_company", "company_id"),
    )

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    parent_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("account_groups.id"),
        nullable=True,
    )

    nature: Mapped[str] = mapped_column(String(20), nullable=False)

    def __repr__(self) -> str:
        return f"<AccountGroup {self.name} ({self.nature})>"


class LedgerModel(TrackedBase):
    """
    Ledger account under a group, with its party details and opening balance.

    Guarantees:
        - (company_id, name) is unique.
        - group_id is required.
        - opening_balance is signed: debit positive, credit negative;
          opening_balance_type repeats the side for readers.
    """

    __tablename__ = "ledgers"

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_ledger_company_name"),
        Index("idx_ledger_company", "company_id"),
        Index("idx_ledger_group", "group_id"),
    )

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    group_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("account_groups.id"),
        nullable=False,
    )

    # Contact and tax identification
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pincode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    gstin: Mapped[str | None] = mapped_column(String(20), nullable=True)
    pan: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    opening_balance: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    opening_balance_type: Mapped[str] = mapped_column(
        String(6),
        nullable=False,
        default="debit",
    )

    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    group: Mapped[AccountGroupModel] = relationship()

    def __repr__(self) -> str:
        return f"<Ledger {self.name}>"


class StockItemModel(TrackedBase):
    """
    Inventory item.

    Guarantees:
        - (company_id, name) is unique; item_code defaults to the name.
        - avg_cost = opening value / opening quantity when quantity is non-zero.
    """

    __tablename__ = "stock_items"

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_stock_item_company_name"),
        Index("idx_stock_item_company", "company_id"),
    )

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    item_code: Mapped[str] = mapped_column(String(255), nullable=False)

    group_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("account_groups.id"),
        nullable=True,
    )

    # Unit quantity code
    uqc: Mapped[str] = mapped_column(String(20), nullable=False, default="NOS")

    hsn_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    gst_rate: Mapped[Decimal | None] = mapped_column(nullable=True)

    quantity_on_hand: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    opening_value: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    avg_cost: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    def __repr__(self) -> str:
        return f"<StockItem {self.name}>"


class VoucherTypeModel(TrackedBase):
    """Voucher type (Sales, Purchase, ...). Seeded per company, not imported."""

    __tablename__ = "voucher_types"

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_voucher_type_company_name"),
    )

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<VoucherType {self.name}>"


class VoucherModel(TrackedBase):
    """
    Accounting transaction header.

    Guarantees:
        - (company_id, voucher_number) is unique.
        - voucher_type_id is required; party_ledger_id is optional.
    """

    __tablename__ = "vouchers"

    __table_args__ = (
        UniqueConstraint("company_id", "voucher_number", name="uq_voucher_company_number"),
        Index("idx_voucher_company_date", "company_id", "voucher_date"),
    )

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    voucher_type_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("voucher_types.id"),
        nullable=False,
    )

    voucher_type: Mapped[str] = mapped_column(String(50), nullable=False)

    voucher_number: Mapped[str] = mapped_column(String(100), nullable=False)

    voucher_date: Mapped[date] = mapped_column(Date, nullable=False)

    party_ledger_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("ledgers.id"),
        nullable=True,
    )

    narration: Mapped[str | None] = mapped_column(Text, nullable=True)

    total_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    entries: Mapped[list["VoucherEntryModel"]] = relationship(
        back_populates="voucher",
        cascade="all, delete-orphan",
        order_by="VoucherEntryModel.line_no",
    )

    def __repr__(self) -> str:
        return f"<Voucher {self.voucher_type} {self.voucher_number}>"


class VoucherEntryModel(TrackedBase):
    """One ledger line of a voucher. ledger_id is null when the ledger is unknown."""

    __tablename__ = "voucher_entries"

    __table_args__ = (
        Index("idx_voucher_entry_voucher", "voucher_id"),
    )

    voucher_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("vouchers.id"),
        nullable=False,
    )

    line_no: Mapped[int] = mapped_column(Integer, nullable=False)

    ledger_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("ledgers.id"),
        nullable=True,
    )

    ledger_name: Mapped[str] = mapped_column(String(255), nullable=False)

    amount: Mapped[Decimal] = mapped_column(nullable=False)

    is_debit: Mapped[bool] = mapped_column(Boolean, nullable=False)

    voucher: Mapped[VoucherModel] = relationship(back_populates="entries")
