"""
Byte-level normalization for uploaded exports.

Tally writes XML as UTF-16LE with a BOM by default, and users re-save files
as UTF-8 (with or without BOM) or a Windows code page. Everything downstream
works on str, so the BOM is detected here and stripped before parsing.
"""

from __future__ import annotations

import codecs
import io
from typing import BinaryIO

from tally_ingestion.exceptions import FatalInputError
from tally_ingestion.logging_config import get_logger

logger = get_logger("adapters.encoding")

EMPTY_MESSAGE = "empty or corrupted file"

# Checked in order; none is a prefix of another.
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

_SNIFF_BYTES = 64 * 1024


def detect_bom(head: bytes) -> tuple[str | None, int]:
    """Return (encoding, BOM length) for the leading bytes, or (None, 0)."""
    for bom, encoding in _BOMS:
        if head.startswith(bom):
            return encoding, len(bom)
    return None, 0


def _decode(data: bytes, fallback_encoding: str) -> str:
    encoding, bom_length = detect_bom(data[:3])
    if encoding is not None:
        try:
            return data[bom_length:].decode(encoding)
        except UnicodeDecodeError as exc:
            raise FatalInputError(
                f"{EMPTY_MESSAGE}: invalid {encoding} content ({exc.reason})"
            ) from exc
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass
    try:
        text = data.decode(fallback_encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise FatalInputError(
            f"{EMPTY_MESSAGE}: not UTF-8 and not {fallback_encoding}"
        ) from exc
    logger.warning(
        "fallback_encoding_used",
        extra={"encoding": fallback_encoding, "byte_count": len(data)},
    )
    return text


def decode_source_bytes(
    data: bytes,
    *,
    markup: bool = False,
    fallback_encoding: str = "cp1252",
) -> str:
    """
    Decode an uploaded buffer into clean text.

    Preconditions: data is the raw upload.
    Postconditions: BOM removed, surrounding whitespace trimmed, and for
        markup (XML) everything before the first "<" dropped.
    Raises:
        FatalInputError: if nothing usable remains.
    """
    if not data:
        raise FatalInputError(EMPTY_MESSAGE)

    text = _decode(data, fallback_encoding).lstrip("\ufeff").strip()

    if markup:
        start = text.find("<")
        if start == -1:
            raise FatalInputError(EMPTY_MESSAGE)
        if start > 0:
            logger.warning("leading_bytes_dropped", extra={"dropped_chars": start})
            text = text[start:]

    if not text:
        raise FatalInputError(EMPTY_MESSAGE)
    return text


def open_text_stream(
    stream: BinaryIO,
    *,
    fallback_encoding: str = "cp1252",
) -> io.TextIOWrapper:
    """
    Wrap a seekable binary stream for row-by-row text reading.

    The BOM is skipped. Without one, the first block is sniffed: if it is
    not UTF-8 the fallback code page is used for the whole stream. Callers
    should detach() the wrapper when done so the binary stream stays theirs.

    Raises:
        FatalInputError: if the stream holds no text.
    """
    head = stream.read(3)
    encoding, bom_length = detect_bom(head)
    stream.seek(bom_length)
    sample = stream.read(_SNIFF_BYTES)
    if not sample.strip():
        raise FatalInputError(EMPTY_MESSAGE)

    if encoding is None:
        encoding = "utf-8"
        try:
            codecs.getincrementaldecoder("utf-8")().decode(sample, final=False)
        except UnicodeDecodeError:
            encoding = fallback_encoding
            logger.warning("fallback_encoding_used", extra={"encoding": encoding})

    stream.seek(bom_length)
    return io.TextIOWrapper(stream, encoding=encoding, newline="")
