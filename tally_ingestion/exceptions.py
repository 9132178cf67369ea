"""
Typed Exception Hierarchy for Tally ingestion.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from TallyIngestionError:

    TallyIngestionError (base)
    |
    +-- FatalInputError
    |   +-- UnsupportedFormatError
    |
    +-- ParseError
    |
    +-- InvalidOptionsError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Input           | FATAL_INPUT                 | Upload unreadable, empty or corrupt
                | UNSUPPORTED_FORMAT          | Extension is not .xml/.xlsx/.xls/.csv
----------------|-----------------------------|-----------------------------------------
Parse           | PARSE_ERROR                 | Malformed XML / workbook / CSV
----------------|-----------------------------|-----------------------------------------
Request         | INVALID_OPTIONS             | maxVouchers not a non-negative integer

===============================================================================
HANDLING PATTERNS
===============================================================================

Only these families abort an import (InvalidOptionsError before any
parsing). Everything that goes wrong for a
single group, ledger, stock item or voucher is reported as a RecordError
inside the ImportResult (see tally_ingestion.domain.results) and the batch
continues:

    try:
        result = service.import_bytes(data, "export.xml", options)
    except ParseError as e:
        return {"error": e.code, "hint": e.hint, "detail": e.detail}
    except FatalInputError as e:
        return {"error": e.code, "message": str(e)}
"""

from __future__ import annotations


class TallyIngestionError(Exception):
    """
    Base exception for all Tally ingestion errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "TALLY_INGESTION_ERROR"


class FatalInputError(TallyIngestionError):
    """The uploaded input cannot be used at all (unreadable, empty, corrupt)."""

    code: str = "FATAL_INPUT"


class UnsupportedFormatError(FatalInputError):
    """The file extension is not one of the supported export formats."""

    code: str = "UNSUPPORTED_FORMAT"

    def __init__(self, extension: str, supported: tuple[str, ...] = ()):
        self.extension = extension
        self.supported = supported
        message = f"Unsupported file format: {extension or '(none)'}"
        if supported:
            message += f" (supported: {', '.join(supported)})"
        super().__init__(message)


class ParseError(TallyIngestionError):
    """The file was readable but its structure could not be parsed."""

    code: str = "PARSE_ERROR"

    def __init__(self, source_format: str, detail: str, hint: str | None = None):
        self.source_format = source_format
        self.detail = detail
        self.hint = hint
        message = f"Failed to parse {source_format.upper()} file: {detail}"
        if hint:
            message += f" ({hint})"
        super().__init__(message)


class InvalidOptionsError(TallyIngestionError):
    """A request option has a value that cannot be used."""

    code: str = "INVALID_OPTIONS"

    def __init__(self, option: str, value: object):
        self.option = option
        self.value = value
        super().__init__(f"Invalid {option}: {value!r} (expected a non-negative integer)")
