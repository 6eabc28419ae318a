from __future__ import annotations

from dataclasses import dataclass
from typing import Union

"""RowData model for the CSV record updater.

RowData represents one data line after splitting and value coercion. It is built
fresh per row and discarded once the mutation plan has been produced.
"""

__all__ = [
    "RowData",
    "TypedValue",
]

TypedValue = Union[None, bool, int, str]


@dataclass(frozen=True)
class RowData:
    """Typed view of a single input line.

    The line_number is the 1-based physical line in the input file (header = 1).
    """
    line_number: int
    raw_values: tuple[str, ...]  # Trimmed fields exactly as they appeared in the file
    values: dict[str, TypedValue]  # Column name -> coerced value (absent columns omitted)

    @property
    def record_type(self) -> TypedValue:
        return self.values.get("record_type")

    @property
    def internal_id(self) -> TypedValue:
        return self.values.get("internal_id")
