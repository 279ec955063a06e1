from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import FILE_LEVEL_FIELD, ErrorRecord
from ..models.validation_result import ValidationResult

"""Error log buffering for row-level and file-level import errors.

- JSON Lines, fixed schema (see models.error_record)
- One `logs/errors-YYYYMMDD-HHMMSS.log` (UTC) per run, created lazily
- Records are buffered and written once by flush()
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. Single-threaded use only."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def add_result(self, file: str, result: ValidationResult) -> int:
        """Buffer one record per field error of a row. Returns the count added."""
        for err in result.errors:
            self.append(
                ErrorRecord.create(
                    file=file,
                    row=result.row_number,
                    field=err.field,
                    error_type=err.kind.value,
                    message=err.message,
                )
            )
        return len(result.errors)

    def add_file_error(self, file: str, error_type: str, message: str) -> None:
        self.append(ErrorRecord.create(file, -1, FILE_LEVEL_FIELD, error_type, message))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file. Nothing is created when empty."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp

