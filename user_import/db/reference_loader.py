from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ..errors import ImportPipelineError
from ..models.config_models import TableNames
from ..models.reference import ExistingUserIndex, ReferenceEntry, ReferenceSet, TeamEntry

"""Reference loader: the snapshot the validator resolves names against.

Loaded once before a batch is validated and never refreshed mid-batch.
Two sources:
- live: SELECTs through a psycopg2 cursor
- offline: a YAML file with the same shape (locations / departments /
  teams / job_grades / users)

Any failure is raised as ReferenceLoadError and aborts the batch.
"""

__all__ = [
    "ReferenceLoadError",
    "load_reference_set",
    "load_existing_users",
    "load_reference_file",
]

logger = logging.getLogger(__name__)


class ReferenceLoadError(ImportPipelineError):
    pass


def _fetch(cursor: Any, sql: str) -> list[tuple[Any, ...]]:
    try:
        cursor.execute(sql)
        return list(cursor.fetchall())
    except Exception as e:
        raise ReferenceLoadError(f"reference query failed: {e}") from e


def _entries(rows: list[tuple[Any, ...]]) -> tuple[ReferenceEntry, ...]:
    return tuple(ReferenceEntry(id=str(r[0]), name=str(r[1])) for r in rows)


def load_reference_set(cursor: Any, tables: TableNames) -> ReferenceSet:
    """Load locations, departments, teams and job grades from the database."""
    locations = _entries(_fetch(cursor, f"SELECT id, name FROM {tables.locations} ORDER BY order_index, name"))
    departments = _entries(
        _fetch(cursor, f"SELECT id, name FROM {tables.departments} ORDER BY order_index, name")
    )
    teams = tuple(
        TeamEntry(id=str(r[0]), name=str(r[1]), department_id=str(r[2]))
        for r in _fetch(cursor, f"SELECT id, name, department_id FROM {tables.teams} ORDER BY order_index, name")
    )
    job_grades = _entries(_fetch(cursor, f"SELECT id, name FROM {tables.job_grades} ORDER BY name"))
    logger.debug(
        "references loaded locations=%d departments=%d teams=%d job_grades=%d",
        len(locations),
        len(departments),
        len(teams),
        len(job_grades),
    )
    return ReferenceSet(
        locations=locations, departments=departments, teams=teams, job_grades=job_grades
    )


def load_existing_users(cursor: Any, tables: TableNames) -> ExistingUserIndex:
    rows = _fetch(cursor, f"SELECT email FROM {tables.users}")
    return ExistingUserIndex.from_emails(r[0] for r in rows)


def _file_entries(data: dict[str, Any], key: str) -> tuple[ReferenceEntry, ...]:
    items = data.get(key) or []
    try:
        return tuple(ReferenceEntry(id=str(i["id"]), name=str(i["name"])) for i in items)
    except (KeyError, TypeError) as e:
        raise ReferenceLoadError(f"invalid '{key}' entry in reference file: {e}") from e


def load_reference_file(path: Path) -> tuple[ReferenceSet, ExistingUserIndex]:
    """Load an offline snapshot from YAML.

    Expected shape::

        locations: [{id: loc-1, name: HQ}]
        departments: [{id: dep-1, name: IT}]
        teams: [{id: team-1, name: Dev, department_id: dep-1}]
        job_grades: [{id: jg-1, name: JG 1.1}]
        users: [alice@example.com]
    """
    if not path.exists():
        raise ReferenceLoadError(f"reference file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ReferenceLoadError(f"invalid reference yaml: {e}") from e
    if not isinstance(data, dict):
        raise ReferenceLoadError("reference file must contain a mapping")

    try:
        teams = tuple(
            TeamEntry(id=str(t["id"]), name=str(t["name"]), department_id=str(t["department_id"]))
            for t in data.get("teams") or []
        )
    except (KeyError, TypeError) as e:
        raise ReferenceLoadError(f"invalid 'teams' entry in reference file: {e}") from e

    references = ReferenceSet(
        locations=_file_entries(data, "locations"),
        departments=_file_entries(data, "departments"),
        teams=teams,
        job_grades=_file_entries(data, "job_grades"),
    )
    users = ExistingUserIndex.from_emails(str(u) for u in data.get("users") or [])
    return references, users
