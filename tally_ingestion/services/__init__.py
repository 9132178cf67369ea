"""Ingestion services: import orchestration and the import template."""

from tally_ingestion.services.import_service import TallyImportService
from tally_ingestion.services.template import get_import_template

__all__ = [
    "TallyImportService",
    "get_import_template",
]
