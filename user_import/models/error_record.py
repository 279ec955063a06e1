from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

One ErrorRecord is written per row-level field error, plus file-level
records (row=-1) for failures that abort a batch. Records are serialized
as JSON Lines with a fixed key set (no extra keys).
"""

__all__ = [
    "ErrorRecord",
    "FILE_LEVEL_FIELD",
]

FILE_LEVEL_FIELD = "<FILE_LEVEL>"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded file name
        row: Spreadsheet row number. -1 for file-level errors
        field: Input column name, or FILE_LEVEL_FIELD
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable message (same text shown in the review report)
    """
    timestamp: str
    file: str
    row: int
    field: str
    error_type: str
    message: str

    @staticmethod
    def create(file: str, row: int, field: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            field=field,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
