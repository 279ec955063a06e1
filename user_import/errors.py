from __future__ import annotations

"""Base exception for failures that abort a whole import batch.

Row-level validation problems are never raised; they are returned as
FieldError values inside the review report.
"""


class ImportPipelineError(Exception):
    """Base class for ConfigError, ImportFileError, ReferenceLoadError and CommitError."""
