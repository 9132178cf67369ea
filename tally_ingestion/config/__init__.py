"""YAML-backed ingestion settings."""

from tally_ingestion.config.settings import (
    CONFIG_ENV_VAR,
    ImportSettings,
    get_default_settings,
    load_settings,
    load_yaml_file,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ImportSettings",
    "get_default_settings",
    "load_settings",
    "load_yaml_file",
]
