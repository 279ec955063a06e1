from __future__ import annotations

from pathlib import Path

import pytest

from user_import.config.loader import ConfigError, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)

    assert cfg.input_file == "./data/users.xlsx"
    assert cfg.reference_file == "./config/references.yml"
    assert cfg.page_size == 500
    assert cfg.tables.users == "users"
    assert cfg.tables.teams == "teams"  # default
    assert cfg.database.port == 5432
    assert cfg.sheet_name is None


def test_load_config_defaults(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("", encoding="utf-8")

    cfg = load_config(path)

    assert cfg.page_size == 1000
    assert cfg.tables.departments == "departments"
    assert cfg.database.dsn is None


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("tables: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(path)


def test_load_config_extra_field(write_config: Path):
    write_config.write_text(
        write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n", encoding="utf-8"
    )

    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_rejects_unsafe_table_name(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace(
        "  users: users", '  users: "users; drop table users"'
    )
    write_config.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_rejects_bad_page_size(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("page_size: 500", "page_size: 0")
    write_config.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)
