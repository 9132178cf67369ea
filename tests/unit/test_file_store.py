"""Tests for the local-disk upload store."""

import pytest

from tally_ingestion.store.file_store import LocalFileStore


class TestLocalFileStore:
    def test_open_absolute_path(self, tmp_path):
        path = tmp_path / "upload.xml"
        path.write_bytes(b"<ENVELOPE/>")
        with LocalFileStore().open(str(path)) as f:
            assert f.read() == b"<ENVELOPE/>"

    def test_relative_ref_resolved_under_root(self, tmp_path):
        (tmp_path / "abc123").write_bytes(b"data")
        store = LocalFileStore(tmp_path)
        with store.open("abc123") as f:
            assert f.read() == b"data"
        store.delete("abc123")
        assert not (tmp_path / "abc123").exists()

    def test_delete_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalFileStore(tmp_path).delete("gone")

    def test_open_missing_raises(self, tmp_path):
        with pytest.raises(OSError):
            LocalFileStore(tmp_path).open("gone")
