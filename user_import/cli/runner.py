from __future__ import annotations

import argparse
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from ..config.loader import ConfigError, load_config
from ..errors import ImportPipelineError
from ..excel.writer import TEMPLATE_FILE_NAME, write_review_report, write_template
from ..logging.init import enable_debug, log_summary, setup_logging
from ..models.config_models import ImportConfig
from ..services.orchestrator import load_references, run_import
from ..services.summary import summary_fields

"""CLI entrypoint for the bulk user importer.

Flow:
- Load .env (overriding) and config/import.yml
- Connect to PostgreSQL, or run offline from reference_file
- --template: write the upload template and exit
- otherwise validate --input, optionally write --report, optionally --commit
- Print the SUMMARY line and exit with 0 (all valid), 2 (some invalid), 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

DEFAULT_CONFIG_PATH = Path("config/import.yml")


def resolve_dsn(cfg: ImportConfig) -> str:
    """Build the connection string.

    Priority:
        1. DATABASE_URL / PGDSN environment variables (.env already loaded)
        2. database.dsn from config
        3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each falling
           back to the database section of the config
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_cursor(conn: Any):  # pragma: no cover (thin wrapper; tested via integration)
    """Yield a cursor and close cursor and connection afterwards.

    Transactions are explicit (the orchestrator issues BEGIN/COMMIT), so the
    connection runs in autocommit mode and the reference SELECTs do not hold
    a transaction open while rows are validated.
    """
    conn.autocommit = True
    cur = conn.cursor()
    try:
        yield cur
    finally:
        cur.close()
        conn.close()


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Bulk user import from Excel / CSV")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Config YAML path")
    p.add_argument("--input", type=Path, default=None, help="Upload file (.xlsx, .xls, .csv)")
    p.add_argument("--commit", action="store_true", help="Insert the valid rows after validation")
    p.add_argument("--report", type=Path, default=None, help="Write the review report (.xlsx or .csv)")
    p.add_argument(
        "--template",
        type=Path,
        nargs="?",
        const=Path(TEMPLATE_FILE_NAME),
        default=None,
        help="Write the upload template workbook and exit",
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _run(args: argparse.Namespace, cfg: ImportConfig, cursor: Any, logger: Any) -> int:
    if args.template is not None:
        references, _ = load_references(cfg, cursor)
        path = write_template(args.template, references)
        logger.info(f"template written: {path}")
        return EXIT_SUCCESS_ALL

    input_path = args.input or (Path(cfg.input_file) if cfg.input_file else None)
    if input_path is None:
        logger.error("no input file (use --input or set input_file in config)")
        return EXIT_FATAL

    outcome = run_import(cfg, input_path, cursor=cursor, commit=args.commit)
    report = outcome.report
    for row in report.invalid_rows:
        logger.warning(f"row {row.row_number}: {'; '.join(row.errors)}")
    if args.report is not None:
        path = write_review_report(report, args.report)
        logger.info(f"review report written: {path}")

    logger.info(f"mode={outcome.mode} valid={report.valid_count} invalid={report.invalid_count}")
    log_summary(summary_fields(outcome))

    if report.invalid_count > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an empty list from tests must not pick up pytest's argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        enable_debug()

    conn = None
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> offline mode")
    else:
        try:
            conn = psycopg2.connect(resolve_dsn(cfg))
        except psycopg2.Error as e:
            if not cfg.reference_file:
                logger.error(f"database: {e}")
                return EXIT_FATAL
            logger.info(f"DB connection failed -> offline mode: {e}")

    try:
        if conn is None:
            return _run(args, cfg, None, logger)
        with _db_cursor(conn) as cur:
            return _run(args, cfg, cur, logger)
    except ImportPipelineError as e:
        logger.error(f"import: {e}")
        return EXIT_FATAL
