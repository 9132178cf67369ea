"""
tally_ingestion -- Tally export import engine.

Parses a Tally export (XML, spreadsheet or CSV) into one canonical set of
groups, ledgers, stock items and vouchers, then merges it create-or-skip into
one company's accounting store.

Architecture:
    adapters/  file bytes -> ParsedDataSet (no DB)
    domain/    frozen records, value normalizers, classifiers, results
    mapping/   header aliases -> canonical records
    promoters/ one record -> store, per entity kind
    services/  TallyImportService orchestrates parse -> promote
    store/, models/, db/  target store contracts and the SQLAlchemy backend
"""
