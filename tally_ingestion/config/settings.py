"""
Configuration Loader (``tally_ingestion.config.settings``).

Responsibility
--------------
Loads the packaged ``defaults.yaml`` (optionally overlaid with an operator
supplied YAML file) into a frozen ``ImportSettings`` instance.  Request-level
switches (which kinds to import, voucher cap) live in ``ImportOptions``; this
module only supplies the defaults those options fall back to.

Failure modes
-------------
* Missing override file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Non-integer ``max_vouchers``  -> ``ValueError`` propagates.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml

CONFIG_ENV_VAR = "TALLY_INGESTION_CONFIG"
DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


@dataclass(frozen=True)
class ImportSettings:
    """Process-wide ingestion defaults."""

    max_vouchers: int = 1000
    default_unit: str = "NOS"
    fallback_encoding: str = "cp1252"
    default_ledgers: tuple[str, ...] = ("Cash", "Bank")
    sheets: Mapping[str, str] = field(default_factory=dict)
    field_aliases: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def sheet_name(self, kind: str) -> str:
        return self.sheets.get(kind, kind.replace("_", " ").title())


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Preconditions:
        - ``path`` must point to an existing, readable YAML file.
    Postconditions:
        - Returns a ``dict`` (possibly empty if the YAML is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if key in ("sheets", "field_aliases") and isinstance(value, dict):
            merged[key] = {**(base.get(key) or {}), **value}
        else:
            merged[key] = value
    return merged


def parse_settings(data: dict[str, Any]) -> ImportSettings:
    """Build ImportSettings from a parsed YAML mapping."""
    aliases = {
        str(name): tuple(str(a) for a in (spellings or ()))
        for name, spellings in (data.get("field_aliases") or {}).items()
    }
    return ImportSettings(
        max_vouchers=int(data.get("max_vouchers", 1000)),
        default_unit=str(data.get("default_unit") or "NOS"),
        fallback_encoding=str(data.get("fallback_encoding") or "cp1252"),
        default_ledgers=tuple(str(n) for n in data.get("default_ledgers") or ()),
        sheets={str(k): str(v) for k, v in (data.get("sheets") or {}).items()},
        field_aliases=aliases,
    )


def load_settings(path: Path | str | None = None) -> ImportSettings:
    """
    Load packaged defaults, overlaid with ``path`` (or $TALLY_INGESTION_CONFIG).

    Postconditions:
        - Keys absent from the override keep their packaged default.
    """
    data = load_yaml_file(DEFAULTS_PATH)
    override = path or os.environ.get(CONFIG_ENV_VAR)
    if override:
        data = _merge(data, load_yaml_file(Path(override)))
    return parse_settings(data)


@lru_cache(maxsize=1)
def get_default_settings() -> ImportSettings:
    """Return the process-wide settings (loaded once)."""
    return load_settings()
