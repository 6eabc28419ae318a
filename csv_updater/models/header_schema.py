from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import SchemaError

"""HeaderSchema model.

The header is parsed once per job from the first non-blank line of the input file
and is read-only afterwards. It is passed explicitly to every row (no shared cache).
"""

__all__ = [
    "HeaderSchema",
    "REQUIRED_COLUMNS",
    "split_fields",
]

REQUIRED_COLUMNS = ("internal_id", "record_type")

_FIELD_SEPARATOR = re.compile(r"\s*,\s*")


def split_fields(line: str) -> list[str]:
    """Split a trimmed CSV line on commas, dropping whitespace around separators."""
    return _FIELD_SEPARATOR.split(line.strip())


@dataclass(frozen=True)
class HeaderSchema:
    """Ordered column names of the import file.

    Attributes:
        header_line: Trimmed original header text (used to detect repeated headers)
        columns: Column names in declared order
    """
    header_line: str
    columns: tuple[str, ...]

    @classmethod
    def parse(cls, first_line: str) -> HeaderSchema:
        header_line = first_line.strip()
        columns = tuple(split_fields(header_line)) if header_line else ()
        if any(required not in columns for required in REQUIRED_COLUMNS):
            raise SchemaError(
                "Invalid import - missing required headers [ internal_id, record_type ]"
            )
        return cls(header_line=header_line, columns=columns)

    def is_header_line(self, line: str) -> bool:
        return line.strip() == self.header_line
