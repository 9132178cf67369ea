"""Local-disk FileStore: refs are paths, optionally relative to a root directory."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO


class LocalFileStore:
    """Uploads saved on local disk by the upload middleware."""

    def __init__(self, root: Path | str | None = None):
        self._root = Path(root) if root is not None else None

    def _path(self, ref: str) -> Path:
        path = Path(ref)
        if self._root is not None and not path.is_absolute():
            path = self._root / path
        return path

    def open(self, ref: str) -> BinaryIO:
        return open(self._path(ref), "rb")

    def delete(self, ref: str) -> None:
        self._path(ref).unlink()
