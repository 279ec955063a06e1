from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import ImportPipelineError

"""Upload reader for the bulk user importer.

The first row of the sheet is the header; every following non-blank row is
one candidate user. Cells are read as text (dtype=str) so that job grades
such as `5` or `1.1` are not turned into floats, and pandas' NA detection is
disabled so that blank cells come back as empty strings.
"""

# .xls is read through xlrd, .xlsx through openpyxl
EXCEL_ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}
CSV_SUFFIXES = {".csv"}


class ImportFileError(ImportPipelineError):
    """Raised when the upload cannot be read or has no data rows."""


def read_frame(path: Path, sheet_name: str | None = None) -> pd.DataFrame:
    """Read the upload into a DataFrame of strings.

    Parameters
    ----------
    path: upload path (.xlsx, .xls or .csv)
    sheet_name: sheet to read; None reads the first sheet
    """
    if not path.exists():
        raise ImportFileError(f"file not found: {path}")
    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_ENGINES:
            df = pd.read_excel(
                path,
                engine=EXCEL_ENGINES[suffix],
                sheet_name=sheet_name if sheet_name is not None else 0,
                dtype=str,
                keep_default_na=False,
            )
        elif suffix in CSV_SUFFIXES:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
        else:
            raise ImportFileError(f"unsupported file type: {path.suffix or '<none>'}")
    except ImportFileError:
        raise
    except Exception as e:
        raise ImportFileError(f"cannot read {path.name}: {e}") from e
    return df


def frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame to column -> value mappings, skipping blank rows."""
    columns = [str(c).strip() for c in df.columns]
    rows: list[dict[str, Any]] = []
    for raw in df.itertuples(index=False, name=None):
        values = ["" if pd.isna(v) else v for v in raw]
        if all(str(v).strip() == "" for v in values):
            continue
        rows.append(dict(zip(columns, values, strict=False)))
    return rows


def read_user_rows(path: Path, sheet_name: str | None = None) -> list[dict[str, Any]]:
    """Read the upload and return its data rows as mappings.

    Raises:
        ImportFileError: missing, unreadable or unsupported file, or no data rows
    """
    rows = frame_to_rows(read_frame(path, sheet_name))
    if not rows:
        raise ImportFileError("file is empty or has no data rows")
    return rows
