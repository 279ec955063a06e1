from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the bulk user importer.

Built by config.loader.load_config() from config/import.yml after schema
validation. Environment variables take precedence over DatabaseConfig at
connection time (see cli).
"""


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection fallback used when environment variables are not set."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class TableNames:
    """Target table names in the job-description database."""
    users: str = "users"
    locations: str = "locations"
    departments: str = "departments"
    teams: str = "teams"
    job_grades: str = "job_grades"


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for one import run."""
    input_file: str | None = None  # upload path when --input is omitted
    sheet_name: str | None = None  # None = first sheet
    reference_file: str | None = None  # YAML snapshot for offline mode
    tables: TableNames = field(default_factory=TableNames)
    page_size: int = 1000  # execute_values page size
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
