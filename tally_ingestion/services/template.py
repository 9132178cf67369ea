"""Import template: what formats are accepted and which columns each kind needs."""

from __future__ import annotations

from typing import Any

from tally_ingestion.adapters.base import SUPPORTED_EXTENSIONS
from tally_ingestion.config.settings import ImportSettings, get_default_settings

_EXPORT_PATH = "Gateway of Tally > Display > List of Accounts > Export"


def get_import_template(settings: ImportSettings | None = None) -> dict[str, Any]:
    """Describe accepted formats, export steps and required columns per kind."""
    settings = settings or get_default_settings()
    return {
        "supportedFormats": ["XML", "Excel (.xlsx, .xls)", "CSV"],
        "extensions": list(SUPPORTED_EXTENSIONS),
        "instructions": {
            "xml": f"Export from Tally: {_EXPORT_PATH} > XML",
            "excel": (
                f"Export from Tally: {_EXPORT_PATH} > Excel. Use one sheet per kind: "
                + ", ".join(
                    settings.sheet_name(kind)
                    for kind in ("groups", "ledgers", "stock_items", "vouchers")
                )
            ),
            "csv": (
                f"Export from Tally: {_EXPORT_PATH} > CSV. Add a Type column "
                "(Group, Ledger, Stock Item or Voucher) to every row"
            ),
        },
        "requiredFields": {
            "groups": ["Name", "Parent (optional)"],
            "ledgers": ["Name", "Group", "Opening Balance (optional)"],
            "stockItems": ["Name", "Group", "Unit", "HSN Code (optional)"],
            "vouchers": ["Type", "Number", "Date", "Party (optional)", "Amount"],
        },
        "maxVouchers": settings.max_vouchers,
    }
