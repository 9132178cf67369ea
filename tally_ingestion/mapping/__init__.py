"""Header alias resolution and row -> record building."""

from tally_ingestion.mapping.fields import FieldMapper, normalize_header

__all__ = ["FieldMapper", "normalize_header"]
