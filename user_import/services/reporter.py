from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from ..models.import_report import ImportReport, ReportRow
from ..models.reference import ExistingUserIndex, ReferenceSet
from ..models.row_data import RawRow
from ..models.validation_result import ValidationResult
from .progress import RowProgress
from .validator import validate_row

"""Batch reporter.

Runs the validator over every parsed row and assembles the review report in
input order. Synchronous, no database access.
"""

logger = logging.getLogger(__name__)


def build_report(
    rows: Sequence[RawRow],
    references: ReferenceSet,
    existing_users: ExistingUserIndex,
    on_result: Callable[[ValidationResult], None] | None = None,
) -> ImportReport:
    """Validate `rows` and return the partitioned report.

    Args:
        rows: parsed rows, in input order
        references: reference snapshot for name resolution
        existing_users: registered emails for duplicate detection
        on_result: optional hook called with every ValidationResult (used by
            the orchestrator to feed the error log)
    """
    report_rows: list[ReportRow] = []
    with RowProgress(len(rows)) as progress:
        for row in rows:
            result = validate_row(row, references, existing_users)
            if on_result is not None:
                on_result(result)
            progress.record(result.is_valid)
            if not result.is_valid:
                logger.debug("row=%d errors=%s", row.row_number, result.messages)
            report_rows.append(
                ReportRow(
                    row_number=row.row_number,
                    values=row.display_values(),
                    errors=tuple(result.messages),
                    resolved=result.resolved,
                )
            )

    report = ImportReport(rows=tuple(report_rows))
    logger.info(
        "validated rows=%d valid=%d invalid=%d",
        report.total_rows,
        report.valid_count,
        report.invalid_count,
    )
    return report
