"""
Import outcome types: per-record errors, per-kind tallies, the final result.

KindTally is the only mutable type here. The import service owns one per
entity kind, appends outcomes to it while records are processed, then
freezes it into a KindResult. Nothing else shares or mutates a tally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from tally_ingestion.domain.types import EntityKind

OVERFLOW_RECORD = "Bulk"


@dataclass(frozen=True)
class RecordError:
    """One record that could not be resolved or created. Never raised."""

    kind: EntityKind
    record: str
    message: str

    @classmethod
    def overflow(cls, total: int, cap: int) -> RecordError:
        """Voucher-cap notice carrying the true parsed total."""
        return cls(
            kind=EntityKind.VOUCHERS,
            record=OVERFLOW_RECORD,
            message=f"Only first {cap} vouchers imported. Total vouchers: {total}",
        )

    def to_dict(self) -> dict[str, str]:
        return {"record": self.record, "message": self.message}


@dataclass(frozen=True)
class KindResult:
    """Frozen counters for one entity kind."""

    kind: EntityKind
    imported: int = 0
    skipped: int = 0
    errors: tuple[RecordError, ...] = ()

    @property
    def attempted(self) -> int:
        return self.imported + self.skipped + sum(
            1 for e in self.errors if e.record != OVERFLOW_RECORD
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "errors": [e.to_dict() for e in self.errors],
        }


class KindTally:
    """Append-only accumulator for one entity kind during a run."""

    def __init__(self, kind: EntityKind):
        self.kind = kind
        self._imported = 0
        self._skipped = 0
        self._errors: list[RecordError] = []

    def imported(self) -> None:
        self._imported += 1

    def skipped(self) -> None:
        self._skipped += 1

    def error(self, record: str | None, message: str) -> None:
        self._errors.append(RecordError(self.kind, record or "(unnamed)", message))

    def append(self, error: RecordError) -> None:
        self._errors.append(error)

    def freeze(self) -> KindResult:
        return KindResult(
            kind=self.kind,
            imported=self._imported,
            skipped=self._skipped,
            errors=tuple(self._errors),
        )


@dataclass(frozen=True)
class ImportSummary:
    """Parsed totals, taken before the voucher cap is applied."""

    total_groups: int = 0
    total_ledgers: int = 0
    total_stock_items: int = 0
    total_vouchers: int = 0
    unrecognized_rows: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalGroups": self.total_groups,
            "totalLedgers": self.total_ledgers,
            "totalStockItems": self.total_stock_items,
            "totalVouchers": self.total_vouchers,
            "unrecognizedRows": self.unrecognized_rows,
        }


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import run."""

    results: Mapping[EntityKind, KindResult] = field(default_factory=dict)
    summary: ImportSummary = field(default_factory=ImportSummary)

    def __getitem__(self, kind: EntityKind) -> KindResult:
        return self.results.get(kind) or KindResult(kind=kind)

    @property
    def groups(self) -> KindResult:
        return self[EntityKind.GROUPS]

    @property
    def ledgers(self) -> KindResult:
        return self[EntityKind.LEDGERS]

    @property
    def stock_items(self) -> KindResult:
        return self[EntityKind.STOCK_ITEMS]

    @property
    def vouchers(self) -> KindResult:
        return self[EntityKind.VOUCHERS]

    @property
    def opening_balances(self) -> KindResult:
        return self[EntityKind.OPENING_BALANCES]

    @property
    def has_errors(self) -> bool:
        return any(r.errors for r in self.results.values())

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            kind.result_key: self[kind].to_dict() for kind in EntityKind
        }
        payload["summary"] = self.summary.to_dict()
        return payload
