"""
Rule tables that turn free-text Tally names into canonical enums.

Both tables are ordered and first match wins. Matching is a case-insensitive
substring test. Order matters: "Sundry Creditors" must hit the sundry
creditor rule before the generic "creditor" rule near the bottom.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from tally_ingestion.domain.types import Nature, VoucherKind

T = TypeVar("T")


@dataclass(frozen=True)
class Rule(Generic[T]):
    """Fires when any pattern occurs in the text and no exclude does."""

    patterns: tuple[str, ...]
    result: T
    excludes: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        if any(x in text for x in self.excludes):
            return False
        return any(p in text for p in self.patterns)


NATURE_RULES: tuple[Rule[Nature], ...] = (
    Rule(("sundry creditor",), Nature.LIABILITY),
    Rule(("sundry debtor",), Nature.ASSET),
    Rule(("capital",), Nature.LIABILITY),
    Rule(
        (
            "current asset",
            "fixed asset",
            "bank",
            "cash",
            "deposits",
            "loans & advances",
            "stock-in-hand",
            "inventory",
        ),
        Nature.ASSET,
    ),
    Rule(
        (
            "current liabilit",
            "duties & taxes",
            "provisions",
            "loan",
            "outstanding",
            "payable",
        ),
        Nature.LIABILITY,
    ),
    Rule(
        ("direct income", "indirect income", "sales account", "revenue", "income"),
        Nature.INCOME,
    ),
    Rule(
        ("direct expense", "indirect expense", "purchase account", "expenses"),
        Nature.EXPENSE,
    ),
    Rule(("asset",), Nature.ASSET),
    Rule(("liability",), Nature.LIABILITY),
    Rule(("sales",), Nature.INCOME, excludes=("creditor", "debtor")),
    Rule(("purchase",), Nature.EXPENSE, excludes=("creditor", "debtor")),
    Rule(("branch", "division"), Nature.ASSET),
    Rule(("creditor",), Nature.LIABILITY),
    Rule(("debtor",), Nature.ASSET),
)

DEFAULT_NATURE = Nature.EXPENSE


VOUCHER_TYPE_RULES: tuple[Rule[VoucherKind], ...] = (
    Rule(("sales", "invoice"), VoucherKind.SALES),
    Rule(("purchase", "bill"), VoucherKind.PURCHASE),
    Rule(("payment",), VoucherKind.PAYMENT),
    Rule(("receipt",), VoucherKind.RECEIPT),
    Rule(("journal",), VoucherKind.JOURNAL),
    Rule(("contra",), VoucherKind.CONTRA),
    Rule(("debit note",), VoucherKind.DEBIT_NOTE),
    Rule(("credit note",), VoucherKind.CREDIT_NOTE),
)

DEFAULT_VOUCHER_KIND = VoucherKind.JOURNAL


def first_match(rules: tuple[Rule[T], ...], text: str | None, default: T) -> T:
    needle = (text or "").strip().lower()
    for rule in rules:
        if rule.matches(needle):
            return rule.result
    return default


def classify_nature(name: str | None) -> Nature:
    """Infer asset/liability/income/expense from a group name."""
    return first_match(NATURE_RULES, name, DEFAULT_NATURE)


def map_voucher_type(text: str | None) -> VoucherKind:
    """Map a source voucher type label to a canonical voucher type."""
    return first_match(VOUCHER_TYPE_RULES, text, DEFAULT_VOUCHER_KIND)
