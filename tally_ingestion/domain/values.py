"""
Scalar normalizers shared by every format parser.

All monetary values go through parse_signed_amount, so XML, spreadsheet and
CSV sources agree on one sign convention: debit positive, credit negative.
None of these functions raise on bad input; unusable values become 0 or None.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")

# Serials from 61 (1900-03-01) on land on the right day; earlier ones are
# one day early since the phantom 1900-02-29 is not corrected for.
SERIAL_EPOCH = date(1899, 12, 31)

# Tried in order after YYYYMMDD and ISO; day-first before month-first.
DATE_FORMATS = (
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%d %b %Y",
    "%d %B %Y",
    "%d-%m-%y",
    "%d/%m/%y",
    "%Y/%m/%d",
    "%m/%d/%Y",
)

_DR_CR_PREFIX = re.compile(r"^(dr|cr)\.?\s*(.*)$", re.IGNORECASE)
_DR_CR_SUFFIX = re.compile(r"^(.*?)\s*(dr|cr)\.?$", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"^\s*(-?[\d,]*\.?\d+)")
_YYYYMMDD = re.compile(r"^\d{8}$")


def _to_decimal(text: str) -> Decimal | None:
    cleaned = text.replace(",", "").replace(" ", "")
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None
    return value if value.is_finite() else None


def parse_signed_amount(value: Any) -> Decimal:
    """
    Parse a Tally amount into a signed Decimal.

    "Dr 1000" -> 1000, "Cr 1000" -> -1000 (marker may also trail the
    number), "500" -> 500. Numbers pass through. Anything unparsable -> 0.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, (int, float)):
        return _to_decimal(str(value)) or ZERO

    text = str(value).strip()
    if not text:
        return ZERO

    marker = None
    match = _DR_CR_PREFIX.match(text)
    if match:
        marker, text = match.group(1), match.group(2)
    else:
        match = _DR_CR_SUFFIX.match(text)
        if match:
            text, marker = match.group(1), match.group(2)

    amount = _to_decimal(text)
    if amount is None:
        return ZERO
    if marker is None:
        return amount
    return abs(amount) if marker.lower() == "dr" else -abs(amount)


def parse_quantity(value: Any) -> Decimal:
    """Leading number of a quantity such as "10 Nos" or "2.5 kg"; 0 when absent."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, (int, float, Decimal)):
        return parse_signed_amount(value)
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return ZERO
    return _to_decimal(match.group(1)) or ZERO


def parse_optional_decimal(value: Any) -> Decimal | None:
    """Decimal for rates like "18" or "18%"; None when blank or unparsable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return _to_decimal(str(value))
    return _to_decimal(str(value).strip().rstrip("%"))


def excel_serial_to_date(serial: int | float | Decimal) -> date | None:
    """Spreadsheet serial day number -> date; the time fraction is dropped."""
    try:
        days = int(serial)
        if days < 1:
            return None
        return SERIAL_EPOCH + timedelta(days=days - 1)
    except (OverflowError, ValueError):
        return None


def parse_source_date(value: Any) -> date | None:
    """
    Normalize a source date to a date, or None when it cannot be read.

    8-digit YYYYMMDD text is split explicitly. date/datetime objects pass
    through. Bare numbers are spreadsheet serials. Other text is tried as
    ISO 8601, then against DATE_FORMATS.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float, Decimal)):
        return excel_serial_to_date(value)

    text = str(value).strip()
    if not text:
        return None
    if _YYYYMMDD.match(text):
        try:
            return date(int(text[:4]), int(text[4:6]), int(text[6:8]))
        except ValueError:
            return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def clean_text(value: Any) -> str | None:
    """Stripped text, or None when blank. Integral numbers lose their ".0"."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None
