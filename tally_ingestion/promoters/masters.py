"""
Master-data promoters: groups, ledgers, stock items.

Group parents are soft references (unresolved -> no parent). A ledger's
group is hard; a stock item's group is hard when one is named.
"""

from __future__ import annotations

from decimal import Decimal

from tally_ingestion.domain.types import EntityKind, Group, Ledger, StockItem
from tally_ingestion.logging_config import get_logger
from tally_ingestion.promoters.base import PromoteResult, entity_id
from tally_ingestion.store.base import ImportStore

logger = get_logger("promoters.masters")


def group_not_found(name: str) -> str:
    return f'Group "{name}" not found'


class GroupPromoter:
    """Creates account groups. Entity kind: groups."""

    kind = EntityKind.GROUPS

    def label(self, record: Group) -> str:
        return record.name

    def promote(self, record: Group, store: ImportStore) -> PromoteResult:
        if not record.name:
            return PromoteResult.failed("Group name is required")

        existing = store.groups.find_by_name(record.name)
        if existing is not None:
            return PromoteResult.skipped(entity_id(existing))

        parent_id = None
        if record.parent and record.parent != record.name:
            parent = store.groups.find_by_name(record.parent)
            if parent is None:
                logger.info(
                    "group_parent_unresolved",
                    extra={"group": record.name, "parent": record.parent},
                )
            else:
                parent_id = entity_id(parent)

        row = store.groups.create(
            {"name": record.name, "parent_id": parent_id, "nature": record.nature.value}
        )
        return PromoteResult.created(entity_id(row))


class LedgerPromoter:
    """Creates ledgers under an existing group. Entity kind: ledgers."""

    kind = EntityKind.LEDGERS

    def label(self, record: Ledger) -> str:
        return record.name

    def promote(self, record: Ledger, store: ImportStore) -> PromoteResult:
        if not record.name:
            return PromoteResult.failed("Ledger name is required")
        if not record.group:
            return PromoteResult.failed(f'Ledger "{record.name}" has no group')

        group = store.groups.find_by_name(record.group)
        if group is None:
            return PromoteResult.failed(group_not_found(record.group))

        existing = store.ledgers.find_by_name(record.name)
        if existing is not None:
            return PromoteResult.skipped(entity_id(existing))

        row = store.ledgers.create(
            {
                "name": record.name,
                "group_id": entity_id(group),
                "address": record.address,
                "state": record.state,
                "pincode": record.pincode,
                "gstin": record.gstin,
                "pan": record.pan,
                "email": record.email,
                "phone": record.phone,
                "opening_balance": record.opening_balance,
                "opening_balance_type": "debit" if record.opening_balance >= 0 else "credit",
                "is_default": record.is_default,
            }
        )
        return PromoteResult.created(entity_id(row))


class StockItemPromoter:
    """Creates stock items with their opening position. Entity kind: stock_items."""

    kind = EntityKind.STOCK_ITEMS

    def label(self, record: StockItem) -> str:
        return record.name

    def promote(self, record: StockItem, store: ImportStore) -> PromoteResult:
        if not record.name:
            return PromoteResult.failed("Stock item name is required")

        group_id = None
        if record.group:
            group = store.groups.find_by_name(record.group)
            if group is None:
                return PromoteResult.failed(group_not_found(record.group))
            group_id = entity_id(group)

        existing = store.stock_items.find_by_name(record.name)
        if existing is not None:
            return PromoteResult.skipped(entity_id(existing))

        avg_cost = Decimal("0")
        if record.opening_stock and record.opening_value:
            avg_cost = record.opening_value / record.opening_stock

        row = store.stock_items.create(
            {
                "name": record.name,
                "item_code": record.name,
                "group_id": group_id,
                "uqc": record.unit,
                "hsn_code": record.hsn_code,
                "gst_rate": record.gst_rate,
                "quantity_on_hand": record.opening_stock,
                "opening_value": record.opening_value,
                "avg_cost": avg_cost,
            }
        )
        return PromoteResult.created(entity_id(row))
