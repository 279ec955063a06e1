from __future__ import annotations

import pytest

from user_import.db.commit import USER_COLUMNS, CommitError, insert_users
from user_import.models.enums import JobGrade, Role
from user_import.models.validation_result import ResolvedUser


class DummyCursor:
    def __init__(self) -> None:
        self.queries: list[str] = []
        self.rows: list[tuple] = []
        self.page_sizes: list[int] = []


@pytest.fixture(autouse=True)
def patch_execute_values(monkeypatch):
    import user_import.db.commit as commit

    def fake_execute_values(cursor, sql, rows, page_size=100):
        cursor.queries.append(sql)
        cursor.rows.extend(rows)
        cursor.page_sizes.append(page_size)

    monkeypatch.setattr(commit, "execute_values", fake_execute_values)
    return fake_execute_values


def _user(email: str = "a@x.com", grade: JobGrade = JobGrade.JG_1_1) -> ResolvedUser:
    return ResolvedUser(
        email=email,
        full_name="A B",
        role=Role.VIEWER,
        job_grade=grade,
        location_id="loc-hq",
        department_id="dep-it",
        team_id="team-dev",
    )


def test_insert_users_builds_insert_and_rows():
    cur = DummyCursor()

    inserted = insert_users(cur, [_user(), _user("b@x.com", JobGrade.UNGRADED)])

    assert inserted == 2
    assert cur.queries == [
        'INSERT INTO users ("email","full_name","role","job_grade","location_id","department_id","team_id") VALUES %s'
    ]
    assert cur.rows[0] == ("a@x.com", "A B", "viewer", "1.1", "loc-hq", "dep-it", "team-dev")
    assert cur.rows[1][3] is None
    assert len(USER_COLUMNS) == len(cur.rows[0])


def test_insert_users_schema_qualified_table_and_page_size():
    cur = DummyCursor()

    insert_users(cur, [_user()], table="public.users", page_size=250)

    assert cur.queries[0].startswith("INSERT INTO public.users ")
    assert cur.page_sizes == [250]


def test_insert_users_empty_is_noop():
    cur = DummyCursor()

    assert insert_users(cur, []) == 0
    assert cur.queries == []


def test_insert_users_rejects_bad_table_name():
    with pytest.raises(CommitError, match="invalid table name"):
        insert_users(DummyCursor(), [_user()], table="users; DROP TABLE users")


def test_insert_users_wraps_driver_errors(monkeypatch):
    import user_import.db.commit as commit

    def failing(*args, **kwargs):
        raise RuntimeError('duplicate key value violates unique constraint "users_email_key"')

    monkeypatch.setattr(commit, "execute_values", failing)

    with pytest.raises(CommitError, match="users_email_key"):
        insert_users(DummyCursor(), [_user()])
