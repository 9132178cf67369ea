"""Entity promoters: canonical records -> target store."""

from tally_ingestion.domain.types import EntityKind
from tally_ingestion.promoters.base import EntityPromoter, PromoteResult, PromoteStatus
from tally_ingestion.promoters.masters import GroupPromoter, LedgerPromoter, StockItemPromoter
from tally_ingestion.promoters.voucher import VoucherPromoter


def default_promoter_registry() -> dict[EntityKind, EntityPromoter]:
    """Return a dict of entity kind -> promoter, in processing order."""
    return {
        EntityKind.GROUPS: GroupPromoter(),
        EntityKind.LEDGERS: LedgerPromoter(),
        EntityKind.STOCK_ITEMS: StockItemPromoter(),
        EntityKind.VOUCHERS: VoucherPromoter(),
    }


__all__ = [
    "EntityPromoter",
    "PromoteResult",
    "PromoteStatus",
    "GroupPromoter",
    "LedgerPromoter",
    "StockItemPromoter",
    "VoucherPromoter",
    "default_promoter_registry",
]
