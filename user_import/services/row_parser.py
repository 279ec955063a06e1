from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from ..models.row_data import RawRow

"""Row parser: source mapping -> RawRow.

Never raises. Missing columns become empty strings; a row with none of the
expected columns still yields a RawRow, and the validator reports its
blank required fields.
"""

__all__ = [
    "FIRST_DATA_ROW",
    "parse_row",
    "parse_rows",
]

# Row 1 is the header
FIRST_DATA_ROW = 2


def _text(value: Any) -> str:
    """Coerce a cell to trimmed text. None / NaN become ''."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            # 5.0 from a numeric cell means "5"
            return str(int(value))
    return str(value).strip()


def parse_row(source: Mapping[str, Any], row_number: int) -> RawRow:
    return RawRow(
        row_number=row_number,
        email=_text(source.get("email")),
        full_name=_text(source.get("full_name")),
        role=_text(source.get("role")).lower(),
        job_grade=_text(source.get("job_grade")),
        location_name=_text(source.get("types_name")),
        department_name=_text(source.get("department_name")),
        team_name=_text(source.get("team_name")),
    )


def parse_rows(rows: Iterable[Mapping[str, Any]]) -> list[RawRow]:
    """Parse rows in input order, numbering them from FIRST_DATA_ROW."""
    return [parse_row(row, idx) for idx, row in enumerate(rows, start=FIRST_DATA_ROW)]
