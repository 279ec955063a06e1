from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

from psycopg2.extras import execute_values

from ..errors import ImportPipelineError
from ..models.validation_result import ResolvedUser

"""Commit step: batched INSERT of resolved users.

Uses psycopg2.extras.execute_values. Transaction boundaries (BEGIN /
COMMIT / ROLLBACK) belong to the orchestrator; this module only issues the
INSERT and wraps driver failures. Nothing is re-validated here, so a user
registered by another session after validation surfaces as a CommitError.
"""

logger = logging.getLogger(__name__)

USER_COLUMNS: tuple[str, ...] = (
    "email",
    "full_name",
    "role",
    "job_grade",
    "location_id",
    "department_id",
    "team_id",
)

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")

class CommitError(ImportPipelineError):
    pass


def insert_users(
    cursor: Any,
    users: Sequence[ResolvedUser],
    table: str = "users",
    page_size: int = 1000,
) -> int:
    """Insert `users` into `table` in one execute_values call; returns the row count.

    Parameters
    ----------
    cursor: psycopg2 cursor inside an open transaction
    users: resolved rows (the valid subset of a report)
    table: target table, optionally schema-qualified
    page_size: rows per VALUES page
    """
    if not _TABLE_NAME.match(table):
        raise CommitError(f"invalid table name: {table!r}")

    rows = [u.to_db_row() for u in users]
    if not rows:
        return 0

    cols_sql = ",".join(f'"{c}"' for c in USER_COLUMNS)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"
    try:
        execute_values(cursor, sql, rows, page_size=page_size)
    except Exception as e:
        raise CommitError(str(e)) from e

    logger.debug("inserted rows=%d table=%s", len(rows), table)
    return len(rows)
