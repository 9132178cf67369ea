"""
Tally XML export parser.

Layout:
    ENVELOPE/BODY/IMPORTDATA/REQUESTDATA/TALLYMESSAGE*
        GROUP* | LEDGER* | STOCKITEM* | VOUCHER*

Any collection may hold one element or many, and a record's name may be a
NAME attribute, a NAME child or a NAME.LIST/NAME child. _collect() and
_record_name() are the only places that deal with those shapes; each record
element is then flattened into a {TAG: text} row and built by FieldMapper,
the same path the spreadsheet and CSV parsers use.
"""

from __future__ import annotations

import re
from typing import Any, BinaryIO

from lxml import etree

from tally_ingestion.adapters.encoding import decode_source_bytes
from tally_ingestion.config.settings import ImportSettings, get_default_settings
from tally_ingestion.domain.types import ParsedDataSet, VoucherEntry
from tally_ingestion.domain.values import clean_text, parse_signed_amount
from tally_ingestion.exceptions import ParseError
from tally_ingestion.logging_config import get_logger
from tally_ingestion.mapping.fields import FieldMapper

logger = get_logger("adapters.xml")

MESSAGE_PATH = ("BODY", "IMPORTDATA", "REQUESTDATA")
MESSAGE_TAG = "TALLYMESSAGE"
ENTRY_CONTAINER_TAGS = frozenset({"ENTRIES", "ALLLEDGERENTRIES.LIST", "LEDGERENTRIES.LIST"})

# (substrings of the lxml message, hint); first match wins.
XML_ERROR_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("premature end", "unexpected end", "endtag: '</' not found", "couldn't find end"),
        "likely truncated upload: the file appears incomplete, re-export and upload it again",
    ),
    (
        (
            "start tag expected",
            "non-whitespace before first tag",
            "document is empty",
            "not proper utf-8",
            "out of allowed range",
            "encoding",
        ),
        "likely encoding/BOM issue: save the export as UTF-8 or UTF-16 with a BOM",
    ),
    (
        ("tag mismatch",),
        "malformed XML: opening and closing tags do not match",
    ),
)

_XML_DECLARATION = re.compile(r"^<\?xml[^>]*\?>")
# Tally emits control characters as references (&#4;) that XML 1.0 forbids.
_INVALID_CHAR_REF = re.compile(r"&#(?:x0*(?:[0-8bBcCeEfF]|1[0-9a-fA-F])|0*(?:[0-8]|1[1-2]|1[4-9]|2[0-9]|3[01]));")


def xml_error_hint(message: str) -> str | None:
    lowered = message.lower()
    for needles, hint in XML_ERROR_HINTS:
        if any(n in lowered for n in needles):
            return hint
    return None


def _collect(parent: Any, tag: str) -> list[Any]:
    """Direct children with this tag, always as a list."""
    if parent is None:
        return []
    return list(parent.iterfind(tag))


def _child_text(elem: Any, tag: str) -> str | None:
    child = elem.find(tag)
    if child is None:
        return None
    return clean_text(child.text)


def _record_name(elem: Any) -> str | None:
    """NAME attribute, NAME child or NAME.LIST/NAME child, in that order."""
    return (
        clean_text(elem.get("NAME"))
        or _child_text(elem, "NAME")
        or _child_text(elem, "NAME.LIST/NAME")
    )


def _flatten(elem: Any) -> dict[str, str]:
    """
    Attributes plus leaf children as {TAG: text}. A *.LIST child holding
    only same-tag leaves (ADDRESS.LIST/ADDRESS) is joined into one value.
    """
    row: dict[str, str] = {}
    name = _record_name(elem)
    if name:
        row["NAME"] = name
    for key, value in elem.attrib.items():
        text = clean_text(value)
        if text and key not in row:
            row[key] = text
    for child in elem:
        if not isinstance(child.tag, str):
            continue
        if len(child) == 0:
            key, text = child.tag, clean_text(child.text)
        elif child.tag.endswith(".LIST"):
            leaves = [c for c in child if isinstance(c.tag, str)]
            if not leaves or any(len(c) for c in leaves) or len({c.tag for c in leaves}) != 1:
                continue
            parts = [clean_text(c.text) for c in leaves]
            key, text = leaves[0].tag, ", ".join(p for p in parts if p) or None
        else:
            continue
        if text and key not in row:
            row[key] = text
    return row


def _voucher_entries(voucher: Any) -> tuple[VoucherEntry, ...]:
    entries: list[VoucherEntry] = []
    for container in voucher:
        if container.tag not in ENTRY_CONTAINER_TAGS:
            continue
        for elem in _collect(container, "ENTRY") or [container]:
            ledger = clean_text(elem.get("LEDGERNAME")) or _child_text(elem, "LEDGERNAME")
            raw_amount = _child_text(elem, "AMOUNT") or elem.get("AMOUNT")
            if ledger is None and raw_amount is None:
                continue
            entries.append(
                VoucherEntry(ledger_name=ledger or "", amount=parse_signed_amount(raw_amount))
            )
    return tuple(entries)


class XmlSourceParser:
    """Parse a Tally XML export. Whole document is decoded in memory."""

    source_format = "xml"

    def __init__(self, settings: ImportSettings | None = None):
        self._settings = settings or get_default_settings()
        self._mapper = FieldMapper(self._settings)

    def parse(self, stream: BinaryIO) -> ParsedDataSet:
        text = decode_source_bytes(
            stream.read(),
            markup=True,
            fallback_encoding=self._settings.fallback_encoding,
        )
        return self.parse_text(text)

    def parse_text(self, text: str) -> ParsedDataSet:
        root = self._load(text)
        mapper = self._mapper

        groups, ledgers, stock_items, vouchers = [], [], [], []
        messages = self._messages(root)
        for message in messages:
            for elem in _collect(message, "GROUP"):
                groups.append(mapper.group_from_row(mapper.normalize_row(_flatten(elem))))
            for elem in _collect(message, "LEDGER"):
                ledgers.append(mapper.ledger_from_row(mapper.normalize_row(_flatten(elem))))
            for elem in _collect(message, "STOCKITEM"):
                stock_items.append(
                    mapper.stock_item_from_row(mapper.normalize_row(_flatten(elem)))
                )
            for elem in _collect(message, "VOUCHER"):
                vouchers.append(
                    mapper.voucher_from_row(
                        mapper.normalize_row(_flatten(elem)),
                        entries=_voucher_entries(elem),
                    )
                )

        logger.info(
            "xml_parsed",
            extra={
                "messages": len(messages),
                "groups": len(groups),
                "ledgers": len(ledgers),
                "stock_items": len(stock_items),
                "vouchers": len(vouchers),
            },
        )
        return ParsedDataSet(
            source_format=self.source_format,
            groups=tuple(groups),
            ledgers=tuple(ledgers),
            stock_items=tuple(stock_items),
            vouchers=tuple(vouchers),
        )

    def _load(self, text: str) -> Any:
        cleaned = _INVALID_CHAR_REF.sub("", _XML_DECLARATION.sub("", text, count=1))
        parser = etree.XMLParser(
            encoding="utf-8",
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            huge_tree=True,
        )
        try:
            root = etree.fromstring(cleaned.encode("utf-8"), parser)
        except etree.XMLSyntaxError as exc:
            detail = str(exc)
            raise ParseError("xml", detail, hint=xml_error_hint(detail)) from exc
        if root is None:
            raise ParseError("xml", "document is empty", hint=xml_error_hint("document is empty"))
        return root

    def _messages(self, root: Any) -> list[Any]:
        node = root if root.tag == "ENVELOPE" else None
        for tag in MESSAGE_PATH:
            node = node.find(tag) if node is not None else None
        messages = _collect(node, MESSAGE_TAG)
        if not messages:
            logger.warning("no_tally_messages", extra={"root_tag": root.tag})
        return messages
