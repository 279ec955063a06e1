from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..models.enums import ErrorKind, JobGrade, Role
from ..models.reference import ExistingUserIndex, ReferenceEntry, ReferenceSet, TeamEntry
from ..models.row_data import RawRow
from ..models.validation_result import FieldError, ResolvedUser, ValidationResult

"""Row validator & resolver.

validate_row() runs every field check of a RawRow against a reference
snapshot and returns exactly one ValidationResult. Checks do not
short-circuit each other: each one yields its own errors and resolved value,
and the results are concatenated in column order. A ResolvedUser is only
built when the concatenated error list is empty.

Team lookup is scoped to the resolved department. When the department did
not resolve, the team is only checked for being blank.

The validator is pure: no I/O, same input -> same output.
"""

__all__ = [
    "EMAIL_PATTERN",
    "validate_row",
    "validate_rows",
]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

T = TypeVar("T")


@dataclass(frozen=True)
class _Check(Generic[T]):
    """Outcome of one field check."""
    errors: tuple[FieldError, ...] = ()
    value: T | None = None


def _fail(field: str, kind: ErrorKind, message: str) -> _Check:
    return _Check(errors=(FieldError(field=field, kind=kind, message=message),))


def _check_email(email: str, existing_users: ExistingUserIndex) -> _Check[str]:
    if not email:
        return _fail("email", ErrorKind.FIELD_REQUIRED, "Email is required")
    if not EMAIL_PATTERN.match(email):
        return _fail("email", ErrorKind.FIELD_MALFORMED, f"Invalid email format: {email}")
    if email in existing_users:
        return _fail("email", ErrorKind.FIELD_DUPLICATE, f"Email already exists: {email}")
    return _Check(value=email)


def _check_full_name(full_name: str) -> _Check[str]:
    if not full_name:
        return _fail("full_name", ErrorKind.FIELD_REQUIRED, "Full name is required")
    return _Check(value=full_name)


def _check_role(label: str) -> _Check[Role]:
    if not label:
        return _fail("role", ErrorKind.FIELD_REQUIRED, "Role is required")
    role = Role.from_label(label)
    if role is None:
        return _fail(
            "role",
            ErrorKind.FIELD_NOT_FOUND,
            f"Invalid role: {label} (must be one of: {', '.join(Role.labels())})",
        )
    return _Check(value=role)


def _check_job_grade(label: str) -> _Check[JobGrade]:
    grade = JobGrade.from_label(label)
    if grade is None:
        return _fail(
            "job_grade",
            ErrorKind.FIELD_NOT_FOUND,
            f"Invalid job grade: {label} (must be one of: {', '.join(JobGrade.labels())} or blank)",
        )
    return _Check(value=grade)


def _check_unique_match(
    field: str,
    label: str,
    name: str,
    matches: Sequence[ReferenceEntry] | Sequence[TeamEntry],
    scope: str = "",
) -> _Check[str]:
    """Turn lookup matches into a resolved id, a not-found or an ambiguity error."""
    if not matches:
        return _fail(field, ErrorKind.FIELD_NOT_FOUND, f"{label} not found: {name}{scope}")
    if len(matches) > 1:
        return _fail(
            field, ErrorKind.FIELD_NOT_FOUND, f"{label} name is ambiguous: {name}{scope}"
        )
    return _Check(value=matches[0].id)


def _check_location(name: str, references: ReferenceSet) -> _Check[str]:
    if not name:
        return _fail("types_name", ErrorKind.FIELD_REQUIRED, "Location (types_name) is required")
    return _check_unique_match("types_name", "Location", name, references.find_locations(name))


def _check_department(name: str, references: ReferenceSet) -> _Check[str]:
    if not name:
        return _fail("department_name", ErrorKind.FIELD_REQUIRED, "Department is required")
    return _check_unique_match(
        "department_name", "Department", name, references.find_departments(name)
    )


def _check_team(
    name: str, department_id: str | None, department_name: str, references: ReferenceSet
) -> _Check[str]:
    if not name:
        return _fail("team_name", ErrorKind.FIELD_REQUIRED, "Team is required")
    if department_id is None:
        # unresolved department: the department error already covers the row
        return _Check()
    return _check_unique_match(
        "team_name",
        "Team",
        name,
        references.find_teams(department_id, name),
        scope=f" in department: {department_name}",
    )


def validate_row(
    row: RawRow, references: ReferenceSet, existing_users: ExistingUserIndex
) -> ValidationResult:
    """Validate and resolve one row. Never raises for bad data."""
    email = _check_email(row.email, existing_users)
    full_name = _check_full_name(row.full_name)
    role = _check_role(row.role)
    job_grade = _check_job_grade(row.job_grade)
    location = _check_location(row.location_name, references)
    department = _check_department(row.department_name, references)
    team = _check_team(row.team_name, department.value, row.department_name, references)

    checks: list[_Check] = [email, full_name, role, job_grade, location, department, team]
    errors = tuple(err for check in checks for err in check.errors)
    if errors:
        return ValidationResult(row_number=row.row_number, errors=errors)

    resolved = ResolvedUser(
        email=email.value,
        full_name=full_name.value,
        role=role.value,
        job_grade=job_grade.value,
        location_id=location.value,
        department_id=department.value,
        team_id=team.value,
    )
    return ValidationResult(row_number=row.row_number, resolved=resolved)


def validate_rows(
    rows: Sequence[RawRow], references: ReferenceSet, existing_users: ExistingUserIndex
) -> list[ValidationResult]:
    return [validate_row(row, references, existing_users) for row in rows]
