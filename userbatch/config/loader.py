from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.table_spec import TableSpec
from ..models.verifier_config import RuleSettings
from ..verify.tables import TABLES

"""Config loader for the user batch verifier.

Responsibilities:
- Load YAML config (default config/verify.yml)
- Validate against the bundled JSON schema
- Apply defaults for rule settings and table locations
"""

__all__ = [
    "ConfigError",
    "VerifyConfig",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/verify.yml")
SCHEMA_PATH = Path(__file__).parent / "verify_config.schema.json"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class VerifyConfig:
    source_directory: str
    rules: RuleSettings
    tables: dict[str, TableSpec]  # key -> table location / layout


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or the data violates
            the schema (missing keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _build_rules(raw: dict[str, Any]) -> RuleSettings:
    defaults = RuleSettings()
    return RuleSettings(
        upn_domain=raw.get("upn_domain", defaults.upn_domain),
        mail_domains=tuple(raw.get("mail_domains", defaults.mail_domains)),
        max_data_rows=raw.get("max_data_rows", defaults.max_data_rows),
    )


def _build_tables(raw: dict[str, Any]) -> dict[str, TableSpec]:
    tables: dict[str, TableSpec] = {}
    for key, spec in TABLES.items():
        override = raw.get(key, {})
        tables[key] = replace(
            spec,
            sheet_name=override.get("sheet", spec.sheet_name),
            header_row=override.get("header_row", spec.header_row),
        )
    return tables


def load_config(path: Path) -> VerifyConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    return VerifyConfig(
        source_directory=data["source_directory"],
        rules=_build_rules(data.get("rules", {})),
        tables=_build_tables(data.get("tables", {})),
    )
