from __future__ import annotations

from dataclasses import dataclass

"""RawRow model for the user import pipeline.

RawRow is one spreadsheet row after field extraction: every value is a
trimmed string (role additionally lower-cased). No validation has happened
at this stage; see services.validator.
"""

__all__ = [
    "RawRow",
    "INPUT_COLUMNS",
]

# Column names of the upload sheet, in template order
INPUT_COLUMNS: tuple[str, ...] = (
    "email",
    "full_name",
    "role",
    "job_grade",
    "types_name",
    "department_name",
    "team_name",
)


@dataclass(frozen=True)
class RawRow:
    """Untyped field values of a single upload row.

    row_number counts data rows from 2 (the header being row 1). Fully blank
    rows are dropped before numbering, so after a blank line it no longer
    equals the sheet row. It is only used in messages.
    """
    row_number: int
    email: str = ""
    full_name: str = ""
    role: str = ""
    job_grade: str = ""
    location_name: str = ""  # types_name column
    department_name: str = ""
    team_name: str = ""

    def display_values(self) -> dict[str, str]:
        """Copy of the raw values keyed by input column name."""
        return {
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role,
            "job_grade": self.job_grade,
            "types_name": self.location_name,
            "department_name": self.department_name,
            "team_name": self.team_name,
        }
