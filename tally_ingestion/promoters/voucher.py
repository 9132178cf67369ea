"""
Voucher promoter.

Voucher type is a hard reference; the party and each entry's ledger are
soft (unresolved -> null id, the name is still stored on the entry).
Deduplication is by voucher number within the company.
"""

from __future__ import annotations

from tally_ingestion.domain.types import EntityKind, Voucher
from tally_ingestion.logging_config import get_logger
from tally_ingestion.promoters.base import PromoteResult, entity_id
from tally_ingestion.store.base import ImportStore

logger = get_logger("promoters.voucher")


class VoucherPromoter:
    """Creates vouchers and their entries. Entity kind: vouchers."""

    kind = EntityKind.VOUCHERS

    def label(self, record: Voucher) -> str:
        return record.number or "(no number)"

    def promote(self, record: Voucher, store: ImportStore) -> PromoteResult:
        if not record.number:
            return PromoteResult.failed("Voucher number is required")
        if record.date is None:
            return PromoteResult.failed("Voucher date is missing or unreadable")

        type_name = record.voucher_type.value
        voucher_type = store.voucher_types.find_by_name(type_name)
        if voucher_type is None:
            return PromoteResult.failed(f'Voucher type "{type_name}" not found')

        party_id = None
        if record.party:
            party = store.ledgers.find_by_name(record.party)
            if party is None:
                logger.info(
                    "voucher_party_unresolved",
                    extra={"voucher_number": record.number, "party": record.party},
                )
            else:
                party_id = entity_id(party)

        existing = store.vouchers.find_by_name(record.number)
        if existing is not None:
            return PromoteResult.skipped(entity_id(existing))

        entries = []
        for line_no, entry in enumerate(record.entries, start=1):
            ledger = store.ledgers.find_by_name(entry.ledger_name)
            entries.append(
                {
                    "line_no": line_no,
                    "ledger_id": entity_id(ledger) if ledger is not None else None,
                    "ledger_name": entry.ledger_name,
                    "amount": entry.amount,
                    "is_debit": entry.is_debit,
                }
            )

        row = store.vouchers.create(
            {
                "voucher_type_id": entity_id(voucher_type),
                "voucher_type": type_name,
                "voucher_number": record.number,
                "voucher_date": record.date,
                "party_ledger_id": party_id,
                "narration": record.narration or None,
                "total_amount": record.total_amount,
                "entries": entries,
            }
        )
        return PromoteResult.created(entity_id(row))
