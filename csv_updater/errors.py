from __future__ import annotations

"""Error taxonomy for the CSV record updater.

SchemaError is job-fatal and propagates out of run_import(). Everything derived
from RowError is row-local: it is caught at the row boundary, turned into a failed
RowResult and never reaches sibling rows.
"""

__all__ = [
    "SchemaError",
    "RowError",
    "FormatError",
    "MissingLineIdError",
    "LoadError",
    "FieldError",
    "SaveError",
]


class SchemaError(Exception):
    """Raised when the header line is missing or lacks required columns."""


class RowError(Exception):
    """Base class for failures confined to a single data row."""

    error_type = "ROW_ERROR"  # UPPER_SNAKE, used in the JSON error log


class FormatError(RowError):
    error_type = "INVALID_FORMAT"


class MissingLineIdError(RowError):
    error_type = "MISSING_LINE_ID"


class LoadError(RowError):
    error_type = "RECORD_LOAD_ERROR"


class FieldError(RowError):
    error_type = "FIELD_ERROR"


class SaveError(RowError):
    error_type = "RECORD_SAVE_ERROR"
