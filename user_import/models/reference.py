from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

"""Reference data snapshot used to resolve spreadsheet labels.

A ReferenceSet is loaded once per import session (see db.reference_loader)
and is never mutated by the pipeline. Lookup indexes are built at
construction time on normalized (trimmed, lower-cased) names so that row
validation is a dictionary lookup instead of a scan per row.
"""

__all__ = [
    "ReferenceEntry",
    "TeamEntry",
    "ReferenceSet",
    "ExistingUserIndex",
    "normalize_name",
]


def normalize_name(value: str) -> str:
    return value.strip().lower()


@dataclass(frozen=True)
class ReferenceEntry:
    """A `{id, name}` row of locations, departments or job grades."""
    id: str
    name: str


@dataclass(frozen=True)
class TeamEntry:
    """A team row. Team names are only unique within a department."""
    id: str
    name: str
    department_id: str


def _index_by_name(entries: Iterable[ReferenceEntry]) -> dict[str, tuple[ReferenceEntry, ...]]:
    index: dict[str, list[ReferenceEntry]] = {}
    for entry in entries:
        index.setdefault(normalize_name(entry.name), []).append(entry)
    return {k: tuple(v) for k, v in index.items()}


@dataclass(frozen=True)
class ReferenceSet:
    """Immutable snapshot of locations, departments, teams and job grades.

    The `find_*` methods return every entry whose normalized name matches.
    Callers treat an empty tuple as "not found" and more than one entry as
    an ambiguous name.
    """
    locations: tuple[ReferenceEntry, ...] = ()
    departments: tuple[ReferenceEntry, ...] = ()
    teams: tuple[TeamEntry, ...] = ()
    job_grades: tuple[ReferenceEntry, ...] = ()
    _location_index: dict[str, tuple[ReferenceEntry, ...]] = field(
        init=False, repr=False, compare=False
    )
    _department_index: dict[str, tuple[ReferenceEntry, ...]] = field(
        init=False, repr=False, compare=False
    )
    _team_index: dict[tuple[str, str], tuple[TeamEntry, ...]] = field(
        init=False, repr=False, compare=False
    )
    _department_by_id: dict[str, ReferenceEntry] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # frozen dataclass: indexes are assigned through object.__setattr__
        object.__setattr__(self, "locations", tuple(self.locations))
        object.__setattr__(self, "departments", tuple(self.departments))
        object.__setattr__(self, "teams", tuple(self.teams))
        object.__setattr__(self, "job_grades", tuple(self.job_grades))
        object.__setattr__(self, "_location_index", _index_by_name(self.locations))
        object.__setattr__(self, "_department_index", _index_by_name(self.departments))
        # first entry wins for a repeated id
        by_id: dict[str, ReferenceEntry] = {}
        for dept in self.departments:
            by_id.setdefault(dept.id, dept)
        object.__setattr__(self, "_department_by_id", by_id)
        team_index: dict[tuple[str, str], list[TeamEntry]] = {}
        for team in self.teams:
            key = (team.department_id, normalize_name(team.name))
            team_index.setdefault(key, []).append(team)
        object.__setattr__(
            self, "_team_index", {k: tuple(v) for k, v in team_index.items()}
        )

    def find_locations(self, name: str) -> tuple[ReferenceEntry, ...]:
        return self._location_index.get(normalize_name(name), ())

    def find_departments(self, name: str) -> tuple[ReferenceEntry, ...]:
        return self._department_index.get(normalize_name(name), ())

    def find_teams(self, department_id: str, name: str) -> tuple[TeamEntry, ...]:
        """Teams named `name` inside the given department only."""
        return self._team_index.get((department_id, normalize_name(name)), ())

    def department_name(self, department_id: str) -> str | None:
        dept = self._department_by_id.get(department_id)
        return dept.name if dept is not None else None


@dataclass(frozen=True)
class ExistingUserIndex:
    """Case-insensitive set of already registered emails."""
    emails: frozenset[str] = frozenset()

    @classmethod
    def from_emails(cls, emails: Iterable[str | None]) -> ExistingUserIndex:
        return cls(emails=frozenset(normalize_name(e) for e in emails if e))

    def __contains__(self, email: object) -> bool:
        if not isinstance(email, str):
            return False
        return normalize_name(email) in self.emails

    def __len__(self) -> int:
        return len(self.emails)
