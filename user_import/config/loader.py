from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..errors import ImportPipelineError
from ..models.config_models import DatabaseConfig, ImportConfig, TableNames

"""Config loader for the bulk user importer.

Responsibilities:
- Load YAML config/import.yml
- Validate it against the bundled schema.json (unknown keys rejected)
- Apply defaults (table names, page_size)
"""

SCHEMA_PATH = Path(__file__).parent / "schema.json"


class ConfigError(ImportPipelineError):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (unknown keys, wrong types).
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


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    tables = TableNames(**(data.get("tables") or {}))
    return ImportConfig(
        input_file=data.get("input_file"),
        sheet_name=data.get("sheet_name"),
        reference_file=data.get("reference_file"),
        tables=tables,
        page_size=data.get("page_size", 1000),
        database=db,
    )
