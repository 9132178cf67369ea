"""
Source parser protocol and the extension registry.

Contract:
    SourceParser.parse() turns one uploaded export into a ParsedDataSet.
    Parsers raise FatalInputError / ParseError for whole-file problems and
    never touch the target store.

Architecture: tally_ingestion/adapters. File I/O only, no DB imports.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import BinaryIO, Callable, Protocol, runtime_checkable

from tally_ingestion.adapters.csv_parser import CsvSourceParser
from tally_ingestion.adapters.xlsx_parser import XlsxSourceParser
from tally_ingestion.adapters.xml_parser import XmlSourceParser
from tally_ingestion.config.settings import ImportSettings, get_default_settings
from tally_ingestion.domain.types import ParsedDataSet
from tally_ingestion.exceptions import UnsupportedFormatError


@runtime_checkable
class SourceParser(Protocol):
    """Protocol for parsing one export format into canonical records."""

    source_format: str

    def parse(self, stream: BinaryIO) -> ParsedDataSet:
        """Parse the whole export. The stream must be seekable."""
        ...


PARSERS_BY_EXTENSION: dict[str, Callable[[ImportSettings], SourceParser]] = {
    ".xml": XmlSourceParser,
    ".xlsx": XlsxSourceParser,
    ".xls": XlsxSourceParser,
    ".csv": CsvSourceParser,
}

SUPPORTED_EXTENSIONS: tuple[str, ...] = tuple(PARSERS_BY_EXTENSION)


def parser_for_filename(
    filename: str,
    settings: ImportSettings | None = None,
) -> SourceParser:
    """
    Pick a parser from the original filename's extension.

    Raises:
        UnsupportedFormatError: for any extension not in SUPPORTED_EXTENSIONS.
    """
    extension = PurePath(filename or "").suffix.lower()
    factory = PARSERS_BY_EXTENSION.get(extension)
    if factory is None:
        raise UnsupportedFormatError(extension, SUPPORTED_EXTENSIONS)
    return factory(settings or get_default_settings())
