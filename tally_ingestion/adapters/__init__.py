"""Source parsers for Tally exports (file I/O only, no DB)."""

from tally_ingestion.adapters.base import (
    SUPPORTED_EXTENSIONS,
    SourceParser,
    parser_for_filename,
)
from tally_ingestion.adapters.csv_parser import CsvSourceParser
from tally_ingestion.adapters.encoding import decode_source_bytes, detect_bom
from tally_ingestion.adapters.xlsx_parser import XlsxSourceParser
from tally_ingestion.adapters.xml_parser import XmlSourceParser

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "SourceParser",
    "parser_for_filename",
    "CsvSourceParser",
    "XlsxSourceParser",
    "XmlSourceParser",
    "decode_source_bytes",
    "detect_bom",
]
