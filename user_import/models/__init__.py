"""Domain models for the bulk user importer.

This package contains the dataclasses and enums shared by the row parser,
validator, reporter and commit step.
"""

from .config_models import DatabaseConfig, ImportConfig, TableNames
from .enums import ErrorKind, JobGrade, Role
from .error_record import ErrorRecord
from .import_report import ImportOutcome, ImportReport, ReportRow
from .reference import ExistingUserIndex, ReferenceEntry, ReferenceSet, TeamEntry
from .row_data import INPUT_COLUMNS, RawRow
from .validation_result import FieldError, ResolvedUser, ValidationResult

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    "TableNames",
    # Enumerations
    "ErrorKind",
    "JobGrade",
    "Role",
    # Reference data
    "ExistingUserIndex",
    "ReferenceEntry",
    "ReferenceSet",
    "TeamEntry",
    # Processing models
    "INPUT_COLUMNS",
    "RawRow",
    "FieldError",
    "ResolvedUser",
    "ValidationResult",
    "ReportRow",
    "ImportReport",
    "ImportOutcome",
    "ErrorRecord",
]
