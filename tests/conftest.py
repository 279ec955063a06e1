# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from user_import.models.reference import (
    ExistingUserIndex,
    ReferenceEntry,
    ReferenceSet,
    TeamEntry,
)

USER_COLUMNS = [
    "email",
    "full_name",
    "role",
    "job_grade",
    "types_name",
    "department_name",
    "team_name",
]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
        for var in ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"):
            monkeypatch.delenv(var, raising=False)
        yield p


@pytest.fixture()
def sample_reference_yaml() -> str:
    return """locations:
  - {id: loc-hq, name: HQ}
  - {id: loc-bo, name: Back Office}
departments:
  - {id: dep-it, name: IT}
  - {id: dep-hr, name: HR}
teams:
  - {id: team-dev, name: Dev, department_id: dep-it}
  - {id: team-ops-it, name: Ops, department_id: dep-it}
  - {id: team-ops-hr, name: Ops, department_id: dep-hr}
job_grades:
  - {id: jg-11, name: JG 1.1}
  - {id: jg-21, name: JG 2.1}
users:
  - existing@example.com
"""


@pytest.fixture()
def sample_config_yaml() -> str:
    return """input_file: ./data/users.xlsx
reference_file: ./config/references.yml
tables:
  users: users
page_size: 500
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str, sample_reference_yaml: str) -> Path:
    (temp_workdir / "config" / "references.yml").write_text(sample_reference_yaml, encoding="utf-8")
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def references() -> ReferenceSet:
    """Same snapshot as sample_reference_yaml."""
    return ReferenceSet(
        locations=(ReferenceEntry("loc-hq", "HQ"), ReferenceEntry("loc-bo", "Back Office")),
        departments=(ReferenceEntry("dep-it", "IT"), ReferenceEntry("dep-hr", "HR")),
        teams=(
            TeamEntry("team-dev", "Dev", "dep-it"),
            TeamEntry("team-ops-it", "Ops", "dep-it"),
            TeamEntry("team-ops-hr", "Ops", "dep-hr"),
        ),
        job_grades=(ReferenceEntry("jg-11", "JG 1.1"), ReferenceEntry("jg-21", "JG 2.1")),
    )


@pytest.fixture()
def existing_users() -> ExistingUserIndex:
    return ExistingUserIndex.from_emails(["existing@example.com"])


def make_user_row(**overrides: Any) -> dict[str, Any]:
    """A source row that passes validation against the `references` fixture."""
    row = {
        "email": "a@x.com",
        "full_name": "A B",
        "role": "viewer",
        "job_grade": "1.1",
        "types_name": "HQ",
        "department_name": "IT",
        "team_name": "Dev",
    }
    row.update(overrides)
    return row


def write_upload(path: Path, rows: list[dict[str, Any]]) -> Path:
    """Write rows as an upload workbook (header in row 1) or CSV by suffix."""
    df = pd.DataFrame(rows, columns=USER_COLUMNS)
    if path.suffix == ".csv":
        df.to_csv(path, index=False)
    else:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Users", index=False)
    return path


@pytest.fixture()
def user_row():
    return make_user_row


@pytest.fixture()
def upload_writer():
    return write_upload
