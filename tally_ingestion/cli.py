"""
Import a Tally export (XML, XLSX or CSV) into one company's books.

Usage:
    tally-import --file <path> --company-id <uuid> [options]

Examples:
    # Local SQLite store, create tables and standard voucher types first
    tally-import --file masters.xml --company-id 6f1c... \\
        --db-url sqlite:///books.db --create-tables --seed-voucher-types

    # Masters only, skip vouchers
    tally-import --file export.xlsx --company-id 6f1c... --no-vouchers

    # Parse and show counts without touching the database
    tally-import --file export.csv --parse-only

    # Print the import template
    tally-import --template
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from uuid import UUID

DB_URL_ENV = "TALLY_INGESTION_DB_URL"
DEFAULT_DB_URL = "sqlite:///tally_ingestion.db"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tally-import",
        description="Import a Tally export into the accounting store (create-or-skip).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--file", type=Path, help="Path to the export (.xml, .xlsx, .xls, .csv).")
    parser.add_argument("--company-id", type=UUID, help="Company the records belong to.")
    parser.add_argument("--actor-id", type=UUID, default=None, help="Actor UUID stamped on created rows.")
    parser.add_argument(
        "--db-url",
        default=os.environ.get(DB_URL_ENV, DEFAULT_DB_URL),
        help=f"Database URL (default: ${DB_URL_ENV} or {DEFAULT_DB_URL!r}).",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML settings override file.")
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables first.")
    parser.add_argument(
        "--seed-voucher-types",
        action="store_true",
        help="Create the standard voucher types for the company first.",
    )
    parser.add_argument("--no-groups", action="store_true", help="Do not import groups.")
    parser.add_argument("--no-ledgers", action="store_true", help="Do not import ledgers.")
    parser.add_argument("--no-stock-items", action="store_true", help="Do not import stock items.")
    parser.add_argument("--no-vouchers", action="store_true", help="Do not import vouchers.")
    parser.add_argument("--max-vouchers", type=int, default=None, help="Voucher cap for this run.")
    parser.add_argument(
        "--parse-only",
        action="store_true",
        help="Parse the file and print record counts. No DB access.",
    )
    parser.add_argument("--template", action="store_true", help="Print the import template and exit.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Structured log level on stderr (default: WARNING).",
    )
    args = parser.parse_args(argv)
    if not args.template:
        if args.file is None:
            parser.error("--file is required")
        if not args.parse_only and args.company_id is None:
            parser.error("--company-id is required unless --parse-only or --template")
    return args


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2, default=str))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Lazy imports so we fail fast on args first
    from tally_ingestion.config.settings import get_default_settings, load_settings
    from tally_ingestion.exceptions import TallyIngestionError
    from tally_ingestion.logging_config import configure_logging
    from tally_ingestion.services.template import get_import_template

    configure_logging(level=getattr(logging, args.log_level))
    settings = load_settings(args.config) if args.config else get_default_settings()

    if args.template:
        _print_json(get_import_template(settings))
        return 0

    source_path = args.file.resolve()
    if not source_path.is_file():
        print(f"ERROR: File not found: {source_path}", file=sys.stderr)
        return 1

    options = {
        "importGroups": not args.no_groups,
        "importLedgers": not args.no_ledgers,
        "importStockItems": not args.no_stock_items,
        "importVouchers": not args.no_vouchers,
        "maxVouchers": args.max_vouchers,
    }

    from tally_ingestion.db.engine import create_tables, init_engine_from_url, session_scope
    from tally_ingestion.services.import_service import TallyImportService
    from tally_ingestion.store.sqlalchemy_store import SqlAlchemyImportStore, seed_voucher_types

    if args.parse_only:
        from tally_ingestion.adapters.base import parser_for_filename

        try:
            with open(source_path, "rb") as f:
                dataset = parser_for_filename(source_path.name, settings).parse(f)
        except TallyIngestionError as e:
            print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
            return 2
        _print_json(
            {
                "format": dataset.source_format,
                "groups": len(dataset.groups),
                "ledgers": len(dataset.ledgers),
                "stockItems": len(dataset.stock_items),
                "vouchers": len(dataset.vouchers),
                "openingBalances": len(dataset.opening_balances),
                "unrecognizedRows": len(dataset.unrecognized_rows),
            }
        )
        return 0

    try:
        init_engine_from_url(args.db_url)
        if args.create_tables:
            create_tables()
    except Exception as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1

    try:
        with session_scope() as session:
            if args.seed_voucher_types:
                seed_voucher_types(session, args.company_id, args.actor_id)
            store = SqlAlchemyImportStore(session, args.company_id, args.actor_id)
            service = TallyImportService(store, settings=settings)
            result = service.import_bytes(source_path.read_bytes(), source_path.name, options)
    except TallyIngestionError as e:
        print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
        return 2

    _print_json(result.to_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
