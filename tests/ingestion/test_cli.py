"""Tests for the tally-import command line."""

import json

import pytest

from tally_ingestion.cli import main
from tally_ingestion.db.engine import reset_engine


@pytest.fixture(autouse=True)
def _reset_engine():
    yield
    reset_engine()


@pytest.fixture
def xml_export(tmp_path, sample_xml_bytes):
    path = tmp_path / "masters.xml"
    path.write_bytes(sample_xml_bytes)
    return path


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'books.db'}"


class TestTemplateAndParseOnly:
    def test_template(self, capsys):
        assert main(["--template"]) == 0
        template = json.loads(capsys.readouterr().out)
        assert template["extensions"] == [".xml", ".xlsx", ".xls", ".csv"]
        assert template["maxVouchers"] == 1000

    def test_parse_only_counts(self, tmp_path, sample_csv_bytes, capsys):
        path = tmp_path / "daybook.csv"
        path.write_bytes(sample_csv_bytes)
        assert main(["--file", str(path), "--parse-only"]) == 0
        counts = json.loads(capsys.readouterr().out)
        assert counts == {
            "format": "csv",
            "groups": 5,
            "ledgers": 2,
            "stockItems": 1,
            "vouchers": 1,
            "openingBalances": 1,
            "unrecognizedRows": 0,
        }

    def test_parse_only_unsupported_extension(self, tmp_path, capsys):
        path = tmp_path / "export.pdf"
        path.write_bytes(b"%PDF-1.4")
        assert main(["--file", str(path), "--parse-only"]) == 2
        assert "UNSUPPORTED_FORMAT" in capsys.readouterr().err


class TestImportCommand:
    def test_full_import_then_rerun_skips(self, xml_export, db_url, company_id, capsys):
        argv = [
            "--file", str(xml_export),
            "--company-id", str(company_id),
            "--db-url", db_url,
            "--create-tables",
            "--seed-voucher-types",
        ]
        assert main(argv) == 0
        first = json.loads(capsys.readouterr().out)
        assert first["groups"]["imported"] == 5
        assert first["ledgers"]["imported"] == 2
        assert first["stockItems"]["imported"] == 1
        assert first["vouchers"]["imported"] == 1
        assert first["openingBalances"]["imported"] == 1

        assert main(argv) == 0
        second = json.loads(capsys.readouterr().out)
        assert second["ledgers"] == {"imported": 0, "skipped": 2, "errors": []}
        assert second["vouchers"]["skipped"] == 1

    def test_no_vouchers_flag(self, xml_export, db_url, company_id, capsys):
        argv = [
            "--file", str(xml_export),
            "--company-id", str(company_id),
            "--db-url", db_url,
            "--create-tables",
            "--no-vouchers",
        ]
        assert main(argv) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["vouchers"] == {"imported": 0, "skipped": 0, "errors": []}
        assert result["summary"]["totalVouchers"] == 1

    def test_negative_max_vouchers_rejected(self, xml_export, db_url, company_id, capsys):
        argv = [
            "--file", str(xml_export),
            "--company-id", str(company_id),
            "--db-url", db_url,
            "--create-tables",
            "--max-vouchers", "-1",
        ]
        assert main(argv) == 2
        assert "INVALID_OPTIONS" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, company_id, capsys):
        argv = ["--file", str(tmp_path / "nope.xml"), "--company-id", str(company_id)]
        assert main(argv) == 1
        assert "File not found" in capsys.readouterr().err

    def test_missing_company_id_is_usage_error(self, xml_export):
        with pytest.raises(SystemExit) as exc_info:
            main(["--file", str(xml_export)])
        assert exc_info.value.code == 2
