from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..db.commit import CommitError, insert_users
from ..db.reference_loader import (
    ReferenceLoadError,
    load_existing_users,
    load_reference_file,
    load_reference_set,
)
from ..errors import ImportPipelineError
from ..excel.reader import ImportFileError, read_user_rows
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ImportConfig
from ..models.import_report import ImportOutcome, ImportReport
from ..models.reference import ExistingUserIndex, ReferenceSet
from .reporter import build_report
from .row_parser import parse_rows

"""Import orchestration: snapshot -> read -> parse -> report -> (commit).

run_import() is the single entry point used by the CLI. Batch-level
failures (unreadable input, reference load failure, commit failure) are
logged as file-level error records and re-raised; row-level errors are
recorded and returned inside the report.
"""

logger = logging.getLogger(__name__)


def load_references(
    config: ImportConfig, cursor: Any = None
) -> tuple[ReferenceSet, ExistingUserIndex]:
    """Load the reference snapshot from the database, or from reference_file when offline.

    Raises:
        ReferenceLoadError: query failure, unreadable file, or no source available
    """
    if cursor is not None:
        references = load_reference_set(cursor, config.tables)
        users = load_existing_users(cursor, config.tables)
        return references, users
    if not config.reference_file:
        raise ReferenceLoadError("no database connection and no reference_file configured")
    return load_reference_file(Path(config.reference_file))


def _commit(cursor: Any, report: ImportReport, config: ImportConfig) -> int:
    """Insert the valid subset inside one transaction."""
    users = report.resolved_users()
    if not users:
        logger.info("nothing to commit (no valid rows)")
        return 0
    try:
        cursor.execute("BEGIN")
        inserted = insert_users(
            cursor, users, table=config.tables.users, page_size=config.page_size
        )
        cursor.execute("COMMIT")
    except Exception as e:
        try:
            cursor.execute("ROLLBACK")
        except Exception as rollback_e:
            logger.warning("rollback failed: %s", rollback_e)
        if isinstance(e, CommitError):
            raise
        raise CommitError(str(e)) from e
    return inserted


def run_import(
    config: ImportConfig,
    input_path: Path,
    cursor: Any = None,
    commit: bool = False,
    error_log: ErrorLogBuffer | None = None,
) -> ImportOutcome:
    """Validate one upload and optionally commit its valid rows.

    Args:
        config: loaded import configuration
        input_path: upload file (.xlsx / .xls / .csv)
        cursor: psycopg2 cursor (None = offline mode, commit is skipped)
        commit: insert the valid subset after validation
        error_log: buffer for JSON Lines error records (a new one by default)

    Raises:
        ImportPipelineError: any batch-level failure; nothing is committed
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    file_name = input_path.name
    mode = "live" if cursor is not None else "offline"

    try:
        references, existing_users = load_references(config, cursor)
        source_rows = read_user_rows(input_path, config.sheet_name)
    except (ReferenceLoadError, ImportFileError) as e:
        error_type = "REFERENCE_LOAD_ERROR" if isinstance(e, ReferenceLoadError) else "FILE_READ_ERROR"
        error_log.add_file_error(file_name, error_type, str(e))
        error_log.flush()
        raise

    logger.info("file=%s rows=%d mode=%s", file_name, len(source_rows), mode)
    raw_rows = parse_rows(source_rows)
    report = build_report(
        raw_rows,
        references,
        existing_users,
        on_result=lambda result: error_log.add_result(file_name, result),
    )

    committed = 0
    if commit:
        if cursor is None:
            logger.warning("offline mode: commit skipped (%d valid rows)", report.valid_count)
        else:
            try:
                committed = _commit(cursor, report, config)
            except ImportPipelineError as e:
                error_log.add_file_error(file_name, "COMMIT_ERROR", str(e))
                error_log.flush()
                raise
            logger.info("committed rows=%d table=%s", committed, config.tables.users)

    log_path = error_log.flush()
    if log_path is not None:
        logger.info("row errors written to %s", log_path)

    end_time = datetime.now(UTC)
    return ImportOutcome(
        report=report,
        committed_rows=committed,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        mode=mode,
        error_log_path=str(log_path) if log_path is not None else None,
    )
