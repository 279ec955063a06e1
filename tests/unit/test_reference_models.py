from __future__ import annotations

import pytest

from user_import.models.enums import JobGrade, Role
from user_import.models.reference import ExistingUserIndex, ReferenceEntry, ReferenceSet, TeamEntry


def test_find_locations_normalizes_name(references):
    assert references.find_locations("  back office ") == (ReferenceEntry("loc-bo", "Back Office"),)
    assert references.find_locations("nowhere") == ()


def test_find_teams_requires_department(references):
    assert [t.id for t in references.find_teams("dep-it", "ops")] == ["team-ops-it"]
    assert [t.id for t in references.find_teams("dep-hr", "OPS")] == ["team-ops-hr"]
    assert references.find_teams("dep-hr", "Dev") == ()


def test_department_name_lookup(references):
    assert references.department_name("dep-hr") == "HR"
    assert references.department_name("missing") is None


def test_department_name_uses_id_index():
    refs = ReferenceSet(departments=[ReferenceEntry("d1", "IT"), ReferenceEntry("d1", "IT (old)")])

    assert refs.department_name("d1") == "IT"
    assert refs._department_by_id == {"d1": ReferenceEntry("d1", "IT")}


def test_reference_set_is_frozen(references):
    with pytest.raises(AttributeError):
        references.locations = ()


def test_reference_set_accepts_lists():
    refs = ReferenceSet(
        locations=[ReferenceEntry("l1", "HQ")],
        teams=[TeamEntry("t1", "Dev", "d1")],
    )

    assert isinstance(refs.locations, tuple)
    assert refs.find_locations("hq")[0].id == "l1"


def test_existing_user_index_is_case_insensitive():
    index = ExistingUserIndex.from_emails(["Alice@Example.com", None, ""])

    assert "alice@example.com" in index
    assert " ALICE@example.COM " in index
    assert "bob@example.com" not in index
    assert len(index) == 1


def test_enum_labels():
    assert Role.labels() == ["admin", "manager", "viewer"]
    assert JobGrade.labels() == ["1.1", "1.2", "2.1", "2.2", "3.1", "3.2", "5"]
    assert JobGrade.from_label("") is JobGrade.UNGRADED
    assert JobGrade.from_label("4") is None
    assert Role.from_label("Admin") is None  # labels are lower-cased by the parser
