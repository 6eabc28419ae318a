from __future__ import annotations

import re
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from ..errors import FormatError, SchemaError
from ..models.header_schema import HeaderSchema, split_fields
from ..models.row_data import RowData, TypedValue

"""CSV reader for the record updater.

Line 1 (first non-blank line) is the header, every following line is a data row.
Fields are separated by commas with surrounding whitespace trimmed; quoting is not
interpreted. Values are coerced to None / bool / int / str before planning.
"""

__all__ = [
    "coerce_value",
    "parse_row",
    "read_lines",
    "read_header",
]

NULL_TEXT = "null"  # case-sensitive
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _within_int_limit(text: str) -> bool:
    limit = sys.get_int_max_str_digits()  # 0 disables the limit
    return limit == 0 or len(text.lstrip("+-")) <= limit


def coerce_value(value: Any) -> TypedValue:
    """Coerce raw text into a typed value.

    Priority: empty / "null" / absent -> None, true/false (any case) -> bool,
    base-10 integer text -> int, anything else unchanged. Non-string input (an
    already typed value) is returned as is.

    Integers are exact up to sys.get_int_max_str_digits() digits; longer digit
    strings are kept as text.

    >>> coerce_value("007"), coerce_value("12.5"), coerce_value("TRUE")
    (7, '12.5', True)
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    if value == "" or value == NULL_TEXT:
        return None
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if _INTEGER.fullmatch(value) and _within_int_limit(value):
        return int(value)
    return value


def parse_row(schema: HeaderSchema, raw_line: str, line_number: int = 0) -> RowData | None:
    """Parse one data line against the header schema.

    Returns None for a repeated header line (skipped, not an error).

    Raises:
        FormatError: the line has fewer than 2 fields
    """
    if schema.is_header_line(raw_line):
        return None
    raw_values = tuple(split_fields(raw_line))
    if len(raw_values) < 2:
        raise FormatError("Invalid format - less than 2 columns")
    # zip() drops raw fields beyond the header; short rows leave trailing columns absent
    values = {col: coerce_value(raw) for col, raw in zip(schema.columns, raw_values)}
    return RowData(line_number=line_number, raw_values=raw_values, values=values)


def read_lines(path: Path) -> list[str]:
    """Read the input file as text lines (newline characters removed)."""
    return path.read_text(encoding="utf-8-sig").splitlines()


def read_header(lines: Iterable[str]) -> tuple[HeaderSchema, Iterator[tuple[int, str]]]:
    """Build the schema from the first non-blank line.

    Returns the schema and an iterator over the remaining (line_number, line) pairs.

    Raises:
        SchemaError: no header line, or required columns missing
    """
    numbered = enumerate(lines, start=1)
    for _, line in numbered:
        if line.strip():
            return HeaderSchema.parse(line), numbered
    raise SchemaError("Invalid import - file has no header line")
