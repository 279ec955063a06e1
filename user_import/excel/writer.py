from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

import pandas as pd
from openpyxl.utils import get_column_letter

from ..errors import ImportPipelineError
from ..models.enums import JobGrade, Role
from ..models.import_report import ImportReport
from ..models.reference import ReferenceSet
from ..models.row_data import INPUT_COLUMNS

"""Workbook writers: the downloadable upload template and the review report.

Both are written with pandas on the openpyxl engine; column widths are set
on the underlying openpyxl worksheets.
"""

__all__ = [
    "TEMPLATE_FILE_NAME",
    "WorkbookWriteError",
    "write_template",
    "write_review_report",
    "template_frames",
]

TEMPLATE_FILE_NAME = "user_import_template.xlsx"

USERS_SHEET = "Users"
VALID_VALUES_SHEET = "Valid Values"
TEAMS_SHEET = "Teams by Department"

FALLBACK_LOCATION = "Back Office"
FALLBACK_DEPARTMENT = "IT"
FALLBACK_TEAM = "Development"
NO_DATA = "no data"

_USERS_WIDTHS = (25, 20, 10, 10, 20, 20, 20)
_JOB_GRADE_NAME = re.compile(r"JG (\d+\.?\d*)")


class WorkbookWriteError(ImportPipelineError):
    """Raised when a template or review report cannot be written."""


# (email, full_name, role, job_grade) of the sample rows
_SAMPLE_USERS = (
    ("somchai@example.com", "Somchai Jaidee", Role.VIEWER, JobGrade.JG_1_1),
    ("somying@example.com", "Somying Rakrian", Role.MANAGER, JobGrade.JG_2_1),
    ("admin@example.com", "System Administrator", Role.ADMIN, JobGrade.JG_3_1),
)


def _job_grade_labels(references: ReferenceSet) -> list[str]:
    # "JG 1.1" -> "1.1"; names without the prefix are listed as-is
    labels = []
    for jg in references.job_grades:
        match = _JOB_GRADE_NAME.search(jg.name)
        labels.append(match.group(1) if match else jg.name)
    return labels or JobGrade.labels()


def _names_or_no_data(names: Sequence[str]) -> str:
    return ", ".join(names) or NO_DATA


def template_frames(references: ReferenceSet) -> dict[str, pd.DataFrame]:
    """Build the template sheets keyed by sheet name (Teams sheet only if teams exist)."""
    location = references.locations[0].name if references.locations else FALLBACK_LOCATION
    department = references.departments[0].name if references.departments else FALLBACK_DEPARTMENT
    team = references.teams[0].name if references.teams else FALLBACK_TEAM

    users = pd.DataFrame(
        [
            {
                "email": email,
                "full_name": name,
                "role": role.value,
                "job_grade": grade.value,
                "types_name": location,
                "department_name": department,
                "team_name": team,
            }
            for email, name, role, grade in _SAMPLE_USERS
        ],
        columns=list(INPUT_COLUMNS),
    )

    valid_values = pd.DataFrame(
        [
            {"column": "role", "valid_values": ", ".join(Role.labels())},
            {
                "column": "job_grade",
                "valid_values": f"{', '.join(_job_grade_labels(references))} (or leave blank)",
            },
            {
                "column": "types_name",
                "valid_values": _names_or_no_data([l.name for l in references.locations]),
            },
            {
                "column": "department_name",
                "valid_values": _names_or_no_data([d.name for d in references.departments]),
            },
            {"column": "team_name", "valid_values": f"depends on department - see '{TEAMS_SHEET}'"},
        ],
        columns=["column", "valid_values"],
    )

    frames = {USERS_SHEET: users, VALID_VALUES_SHEET: valid_values}
    if references.teams:
        frames[TEAMS_SHEET] = pd.DataFrame(
            [
                {
                    "department_name": references.department_name(t.department_id) or "Unknown",
                    "team_name": t.name,
                }
                for t in references.teams
            ],
            columns=["department_name", "team_name"],
        )
    return frames


def _set_widths(writer: pd.ExcelWriter, sheet: str, widths: Sequence[int]) -> None:
    ws = writer.sheets[sheet]
    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def write_template(path: Path, references: ReferenceSet) -> Path:
    """Write the upload template workbook and return its path."""
    frames = template_frames(references)
    widths = {
        USERS_SHEET: _USERS_WIDTHS,
        VALID_VALUES_SHEET: (20, 60),
        TEAMS_SHEET: (25, 25),
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet, df in frames.items():
                df.to_excel(writer, sheet_name=sheet, index=False)
                _set_widths(writer, sheet, widths[sheet])
    except OSError as e:
        raise WorkbookWriteError(f"cannot write template {path}: {e}") from e
    return path


def report_frame(report: ImportReport) -> pd.DataFrame:
    records = []
    for row in report.rows:
        record: dict[str, object] = {"row": row.row_number}
        record.update(row.values)
        record["is_valid"] = row.is_valid
        record["errors"] = "; ".join(row.errors)
        records.append(record)
    return pd.DataFrame(records, columns=["row", *INPUT_COLUMNS, "is_valid", "errors"])


def write_review_report(report: ImportReport, path: Path) -> Path:
    """Write the review table to .xlsx or .csv (chosen by suffix)."""
    df = report_frame(report)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() == ".csv":
            df.to_csv(path, index=False, encoding="utf-8")
        else:
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name="Review", index=False)
                _set_widths(writer, "Review", (6, *_USERS_WIDTHS, 8, 60))
    except OSError as e:
        raise WorkbookWriteError(f"cannot write review report {path}: {e}") from e
    return path
