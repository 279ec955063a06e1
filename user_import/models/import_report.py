from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .validation_result import ResolvedUser

"""Review report models for the user import pipeline.

ImportReport aggregates the per-row results of one batch in input order.
ImportOutcome wraps a report with what happened afterwards (commit, timing)
and feeds the SUMMARY line.
"""

__all__ = [
    "ReportRow",
    "ImportReport",
    "ImportOutcome",
]


@dataclass(frozen=True)
class ReportRow:
    """One line of the review table."""
    row_number: int
    values: dict[str, str]  # display-safe copy of the seven raw fields
    errors: tuple[str, ...] = ()
    resolved: ResolvedUser | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class ImportReport:
    """Partitioned result of a whole batch."""
    rows: tuple[ReportRow, ...]

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def valid_rows(self) -> list[ReportRow]:
        return [r for r in self.rows if r.is_valid]

    @property
    def invalid_rows(self) -> list[ReportRow]:
        return [r for r in self.rows if not r.is_valid]

    @property
    def valid_count(self) -> int:
        return len(self.valid_rows)

    @property
    def invalid_count(self) -> int:
        return self.total_rows - self.valid_count

    def resolved_users(self) -> list[ResolvedUser]:
        """The importable subset, in input order."""
        return [r.resolved for r in self.rows if r.resolved is not None]

    def commit_payload(self) -> list[dict[str, str | None]]:
        return [u.to_payload() for u in self.resolved_users()]


@dataclass(frozen=True)
class ImportOutcome:
    report: ImportReport
    committed_rows: int  # 0 in review-only runs
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    mode: str  # "live" or "offline"
    error_log_path: str | None = None
