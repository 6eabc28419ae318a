"""Domain models for the CSV record updater.

This package contains the value types that flow through the import: the header
schema, typed rows, mutation operations, row results and the aggregated result.
"""

from .error_record import ErrorRecord
from .header_schema import REQUIRED_COLUMNS, HeaderSchema
from .operations import Operation, SelectLine, SelectSublist, SetBodyField, SetSublistField
from .processing_result import ImportResult
from .row_data import RowData, TypedValue
from .row_result import RowResult, RowStatus

__all__ = [
    # Schema & rows
    "HeaderSchema",
    "REQUIRED_COLUMNS",
    "RowData",
    "TypedValue",
    # Operations
    "Operation",
    "SetBodyField",
    "SelectSublist",
    "SelectLine",
    "SetSublistField",
    # Results
    "RowResult",
    "RowStatus",
    "ImportResult",
    "ErrorRecord",
]
