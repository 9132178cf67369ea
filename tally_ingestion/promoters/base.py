"""
EntityPromoter protocol and PromoteResult.

Promoters write one canonical record into the import store. Each call runs
inside a savepoint managed by TallyImportService. Within promote() the order
is fixed: resolve hard references, then check the natural key, then create.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol
from uuid import UUID

from tally_ingestion.domain.types import EntityKind
from tally_ingestion.store.base import ImportStore


class PromoteStatus(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"  # Natural key already present; nothing written
    FAILED = "failed"


@dataclass(frozen=True)
class PromoteResult:
    """Result of a single promotion attempt."""

    status: PromoteStatus
    entity_id: UUID | None = None
    error: str | None = None

    @classmethod
    def created(cls, entity_id: UUID | None) -> PromoteResult:
        return cls(PromoteStatus.CREATED, entity_id=entity_id)

    @classmethod
    def skipped(cls, entity_id: UUID | None) -> PromoteResult:
        return cls(PromoteStatus.SKIPPED, entity_id=entity_id)

    @classmethod
    def failed(cls, error: str) -> PromoteResult:
        return cls(PromoteStatus.FAILED, error=error)


class EntityPromoter(Protocol):
    """Protocol for writing one kind of canonical record to the store."""

    @property
    def kind(self) -> EntityKind:
        ...

    def label(self, record: Any) -> str:
        """Identifier used in error entries (name, or voucher number)."""
        ...

    def promote(self, record: Any, store: ImportStore) -> PromoteResult:
        ...


def entity_id(row: Any) -> UUID | None:
    return getattr(row, "id", None)
