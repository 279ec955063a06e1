from __future__ import annotations

from ..models.import_report import ImportOutcome

"""SUMMARY line rendering for the bulk user importer.

Format:
SUMMARY rows={total} valid={valid} invalid={invalid} committed={committed} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    # integers without decimals; tiny values without scientific notation
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def summary_fields(outcome: ImportOutcome) -> str:
    """The key=value part of the SUMMARY line (the label comes from the log formatter)."""
    report = outcome.report
    return (
        f"rows={report.total_rows} "
        f"valid={report.valid_count} "
        f"invalid={report.invalid_count} "
        f"committed={outcome.committed_rows} "
        f"elapsed_sec={_format_seconds(outcome.elapsed_seconds)}"
    )


def render_summary_line(outcome: ImportOutcome) -> str:
    """Render the SUMMARY line of one run.

    >>> from datetime import datetime, timezone
    >>> from user_import.models.import_report import ImportReport
    >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> o = ImportOutcome(ImportReport(rows=()), 0, t, t, 2.0, "offline")
    >>> render_summary_line(o)
    'SUMMARY rows=0 valid=0 invalid=0 committed=0 elapsed_sec=2'
    """
    return f"SUMMARY {summary_fields(outcome)}"
