"""
Import service: parse -> promote, one Tally export per call.

Orchestrates source parsers and entity promoters. Kinds run strictly in
order Groups -> Ledgers -> Stock Items -> Vouchers because later kinds look
up records created earlier in the same run. One savepoint per record: a
failing record is rolled back and reported, and the run continues.

Only FatalInputError / ParseError escape; everything that goes wrong for a
single record ends up as a RecordError in the ImportResult.
"""

from __future__ import annotations

import io
from typing import Any, BinaryIO, Iterable, Mapping
from uuid import uuid4

from tally_ingestion.adapters.base import parser_for_filename
from tally_ingestion.config.settings import ImportSettings, get_default_settings
from tally_ingestion.domain.results import (
    ImportResult,
    ImportSummary,
    KindTally,
    RecordError,
)
from tally_ingestion.domain.types import EntityKind, ImportOptions, Ledger, ParsedDataSet
from tally_ingestion.exceptions import FatalInputError, TallyIngestionError
from tally_ingestion.logging_config import LogContext, get_logger
from tally_ingestion.promoters import default_promoter_registry
from tally_ingestion.promoters.base import EntityPromoter, PromoteResult, PromoteStatus
from tally_ingestion.store.base import FileStore, ImportStore

logger = get_logger("services.import_service")


def _as_options(
    options: ImportOptions | Mapping[str, Any] | None,
    settings: ImportSettings,
) -> ImportOptions:
    if isinstance(options, ImportOptions):
        return options
    return ImportOptions.from_mapping(options, default_max_vouchers=settings.max_vouchers)


class TallyImportService:
    """Imports parsed Tally data into one company's store."""

    def __init__(
        self,
        store: ImportStore,
        *,
        settings: ImportSettings | None = None,
        promoters: Mapping[EntityKind, EntityPromoter] | None = None,
        file_store: FileStore | None = None,
    ):
        self._store = store
        self._settings = settings or get_default_settings()
        self._promoters = dict(promoters or default_promoter_registry())
        self._file_store = file_store

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def parse(self, stream: BinaryIO, filename: str) -> ParsedDataSet:
        """
        Parse one export. The parser is picked from filename's extension.

        Raises:
            UnsupportedFormatError: extension not supported (before reading).
            FatalInputError: empty or undecodable input.
            ParseError: structurally broken input.
        """
        parser = parser_for_filename(filename, self._settings)
        return parser.parse(stream)

    def import_bytes(
        self,
        data: bytes,
        filename: str,
        options: ImportOptions | Mapping[str, Any] | None = None,
    ) -> ImportResult:
        """Parse an in-memory upload and run the import."""
        options = _as_options(options, self._settings)
        with LogContext.bind(source_file=filename):
            dataset = self.parse(io.BytesIO(data), filename)
            return self.run(dataset, options)

    def import_upload(
        self,
        ref: str,
        original_filename: str,
        options: ImportOptions | Mapping[str, Any] | None = None,
    ) -> ImportResult:
        """
        Import an upload held by the FileStore, then delete it.

        The upload is deleted whether the import succeeds or not; a failed
        delete is logged and never changes the outcome.
        """
        if self._file_store is None:
            raise RuntimeError("import_upload() requires a file_store")

        with LogContext.bind(source_file=original_filename):
            try:
                options = _as_options(options, self._settings)
                parser = parser_for_filename(original_filename, self._settings)
                try:
                    stream = self._file_store.open(ref)
                except OSError as exc:
                    raise FatalInputError(f"cannot read upload: {exc}") from exc
                with stream:
                    dataset = parser.parse(stream)
                return self.run(dataset, options)
            except TallyIngestionError as exc:
                logger.warning(
                    "import_rejected",
                    extra={"error_code": exc.code, "error_msg": str(exc)},
                )
                raise
            finally:
                self._discard_upload(ref)

    def run(
        self,
        dataset: ParsedDataSet,
        options: ImportOptions | Mapping[str, Any] | None = None,
    ) -> ImportResult:
        """Merge a parsed dataset into the store (create-or-skip per record)."""
        options = _as_options(options, self._settings)
        company_id = getattr(self._store, "company_id", None)

        with LogContext.bind(
            correlation_id=str(uuid4()),
            company_id=str(company_id) if company_id is not None else None,
        ):
            logger.info(
                "import_started",
                extra={
                    "source_format": dataset.source_format,
                    "groups": len(dataset.groups),
                    "ledgers": len(dataset.ledgers),
                    "stock_items": len(dataset.stock_items),
                    "vouchers": len(dataset.vouchers),
                    "max_vouchers": options.max_vouchers,
                },
            )
            tallies = {kind: KindTally(kind) for kind in EntityKind}

            if options.import_groups:
                self._promote_all(EntityKind.GROUPS, dataset.groups, tallies)
            if options.import_ledgers:
                self._promote_all(EntityKind.LEDGERS, dataset.ledgers, tallies)
            if options.import_stock_items:
                self._promote_all(EntityKind.STOCK_ITEMS, dataset.stock_items, tallies)
            if options.import_vouchers:
                self._import_vouchers(dataset, options.max_vouchers, tallies)

            result = ImportResult(
                results={kind: tally.freeze() for kind, tally in tallies.items()},
                summary=ImportSummary(
                    total_groups=len(dataset.groups),
                    total_ledgers=len(dataset.ledgers),
                    total_stock_items=len(dataset.stock_items),
                    total_vouchers=len(dataset.vouchers),
                    unrecognized_rows=len(dataset.unrecognized_rows),
                ),
            )
            logger.info(
                "import_completed",
                extra={
                    kind.value: {
                        "imported": r.imported,
                        "skipped": r.skipped,
                        "errors": len(r.errors),
                    }
                    for kind, r in result.results.items()
                },
            )
            return result

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _import_vouchers(
        self,
        dataset: ParsedDataSet,
        cap: int,
        tallies: dict[EntityKind, KindTally],
    ) -> None:
        total = len(dataset.vouchers)
        self._promote_all(EntityKind.VOUCHERS, dataset.vouchers[:cap], tallies)
        if total > cap:
            tallies[EntityKind.VOUCHERS].append(RecordError.overflow(total, cap))
            logger.warning("voucher_cap_applied", extra={"total": total, "cap": cap})

    def _promote_all(
        self,
        kind: EntityKind,
        records: Iterable[Any],
        tallies: dict[EntityKind, KindTally],
    ) -> None:
        promoter = self._promoters[kind]
        tally = tallies[kind]
        for record in records:
            result = self._promote_one(promoter, record)
            label = promoter.label(record)
            if result.status is PromoteStatus.CREATED:
                tally.imported()
            elif result.status is PromoteStatus.SKIPPED:
                tally.skipped()
            else:
                tally.error(label, result.error or "Unknown error")
            if kind is EntityKind.LEDGERS:
                self._tally_opening_balance(record, result, tallies[EntityKind.OPENING_BALANCES])

    def _promote_one(self, promoter: EntityPromoter, record: Any) -> PromoteResult:
        label = promoter.label(record)
        savepoint = self._store.begin_savepoint()
        try:
            result = promoter.promote(record, self._store)
        except Exception as exc:
            savepoint.rollback()
            logger.warning(
                "record_failed",
                extra={"kind": promoter.kind.value, "record_label": label, "error_msg": str(exc)},
                exc_info=True,
            )
            return PromoteResult.failed(str(exc) or type(exc).__name__)

        if result.status is PromoteStatus.CREATED:
            savepoint.commit()
            logger.debug(
                "record_imported",
                extra={"kind": promoter.kind.value, "record_label": label},
            )
        elif result.status is PromoteStatus.SKIPPED:
            savepoint.rollback()
            logger.info(
                "record_skipped",
                extra={"kind": promoter.kind.value, "record_label": label, "reason": "duplicate"},
            )
        else:
            savepoint.rollback()
            logger.warning(
                "record_failed",
                extra={"kind": promoter.kind.value, "record_label": label, "error_msg": result.error},
            )
        return result

    @staticmethod
    def _tally_opening_balance(record: Ledger, result: PromoteResult, tally: KindTally) -> None:
        if not record.opening_balance:
            return
        if result.status is PromoteStatus.CREATED:
            tally.imported()
        elif result.status is PromoteStatus.SKIPPED:
            tally.skipped()
        else:
            tally.error(record.name, result.error or "Unknown error")

    def _discard_upload(self, ref: str) -> None:
        try:
            self._file_store.delete(ref)
        except Exception:
            logger.warning("upload_delete_failed", extra={"ref": ref}, exc_info=True)
