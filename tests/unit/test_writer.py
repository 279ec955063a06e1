from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from openpyxl import load_workbook

from user_import.excel.writer import (
    WorkbookWriteError,
    template_frames,
    write_review_report,
    write_template,
)
from user_import.models.reference import ReferenceSet
from user_import.services.reporter import build_report
from user_import.services.row_parser import parse_rows


def test_template_sheets_and_samples(tmp_path: Path, references):
    path = write_template(tmp_path / "user_import_template.xlsx", references)

    sheets = pd.read_excel(path, sheet_name=None, dtype=str, keep_default_na=False)
    assert list(sheets) == ["Users", "Valid Values", "Teams by Department"]

    users = sheets["Users"]
    assert list(users.columns) == [
        "email",
        "full_name",
        "role",
        "job_grade",
        "types_name",
        "department_name",
        "team_name",
    ]
    assert list(users["role"]) == ["viewer", "manager", "admin"]
    assert list(users["job_grade"]) == ["1.1", "2.1", "3.1"]
    assert set(users["types_name"]) == {"HQ"}
    assert set(users["department_name"]) == {"IT"}
    assert set(users["team_name"]) == {"Dev"}

    valid = dict(zip(sheets["Valid Values"]["column"], sheets["Valid Values"]["valid_values"]))
    assert valid["role"] == "admin, manager, viewer"
    assert valid["job_grade"].startswith("1.1, 2.1")
    assert valid["types_name"] == "HQ, Back Office"
    assert valid["department_name"] == "IT, HR"

    teams = sheets["Teams by Department"]
    assert list(zip(teams["department_name"], teams["team_name"])) == [
        ("IT", "Dev"),
        ("IT", "Ops"),
        ("HR", "Ops"),
    ]

    wb = load_workbook(path)
    assert wb["Users"].column_dimensions["A"].width == 25


def test_template_fallbacks_without_reference_data():
    frames = template_frames(ReferenceSet())

    assert "Teams by Department" not in frames
    users = frames["Users"]
    assert set(users["types_name"]) == {"Back Office"}
    assert set(users["department_name"]) == {"IT"}
    assert set(users["team_name"]) == {"Development"}
    valid = dict(zip(frames["Valid Values"]["column"], frames["Valid Values"]["valid_values"]))
    assert valid["job_grade"].startswith("1.1, 1.2, 2.1, 2.2, 3.1, 3.2, 5")
    assert valid["types_name"] == "no data"


def test_review_report_csv(tmp_path: Path, references, existing_users, user_row):
    report = build_report(
        parse_rows([user_row(), user_row(email="", full_name="")]), references, existing_users
    )

    path = write_review_report(report, tmp_path / "review.csv")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    assert list(df["row"]) == ["2", "3"]
    assert list(df["is_valid"]) == ["True", "False"]
    assert df["errors"][0] == ""
    assert df["errors"][1] == "Email is required; Full name is required"


def test_review_report_xlsx(tmp_path: Path, references, existing_users, user_row):
    report = build_report(parse_rows([user_row(role="owner")]), references, existing_users)

    path = write_review_report(report, tmp_path / "out" / "review.xlsx")

    df = pd.read_excel(path, sheet_name="Review")
    assert df.shape[0] == 1
    assert "Invalid role" in df["errors"][0]


def test_review_report_unwritable_path(tmp_path: Path, references, existing_users, user_row):
    report = build_report(parse_rows([user_row()]), references, existing_users)
    (tmp_path / "blocker").write_text("not a directory", encoding="utf-8")

    with pytest.raises(WorkbookWriteError, match="cannot write review report"):
        write_review_report(report, tmp_path / "blocker" / "review.xlsx")


def test_template_unwritable_path(tmp_path: Path, references):
    (tmp_path / "blocker").write_text("not a directory", encoding="utf-8")

    with pytest.raises(WorkbookWriteError, match="cannot write template"):
        write_template(tmp_path / "blocker" / "template.xlsx", references)
