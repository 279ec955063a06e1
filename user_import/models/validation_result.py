from __future__ import annotations

from dataclasses import dataclass

from .enums import ErrorKind, JobGrade, Role

"""Per-row validation outcome models.

A ValidationResult always carries the ordered field errors of one row. A
ResolvedUser is attached only when that list is empty; both are produced by
the same validate_row() call.
"""

__all__ = [
    "FieldError",
    "ResolvedUser",
    "ValidationResult",
]


@dataclass(frozen=True)
class FieldError:
    field: str  # input column name
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class ResolvedUser:
    """A row whose labels were all resolved to reference identifiers."""
    email: str
    full_name: str
    role: Role
    job_grade: JobGrade
    location_id: str
    department_id: str
    team_id: str

    def to_payload(self) -> dict[str, str | None]:
        """Commit payload shape (camelCase keys as consumed by the users API)."""
        return {
            "email": self.email,
            "fullName": self.full_name,
            "role": self.role.value,
            "jobGrade": self.job_grade.payload_value,
            "locationId": self.location_id,
            "departmentId": self.department_id,
            "teamId": self.team_id,
        }

    def to_db_row(self) -> tuple[str, str, str, str | None, str, str, str]:
        """Values in the column order used by db.commit.insert_users."""
        return (
            self.email,
            self.full_name,
            self.role.value,
            self.job_grade.payload_value,
            self.location_id,
            self.department_id,
            self.team_id,
        )


@dataclass(frozen=True)
class ValidationResult:
    row_number: int
    errors: tuple[FieldError, ...] = ()
    resolved: ResolvedUser | None = None

    def __post_init__(self) -> None:
        if self.errors and self.resolved is not None:
            raise ValueError("a row with errors cannot carry a resolved user")
        if not self.errors and self.resolved is None:
            raise ValueError("a valid row must carry a resolved user")

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]
