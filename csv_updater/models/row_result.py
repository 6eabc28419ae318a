from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""RowResult model: outcome of processing one data row.

Exactly one RowResult is produced per data row (duplicate header lines and blank
lines produce none). The raw values are kept in their original textual form so the
report echoes the input unchanged.
"""

__all__ = [
    "RowStatus",
    "RowResult",
]


class RowStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class RowResult:
    line_number: int
    raw_values: tuple[str, ...]
    error_message: str = ""  # Empty on success
    error_type: str | None = None  # UPPER_SNAKE classification when failed
    line_misses: int = 0  # Sublist lookups that matched no line (non-fatal)

    @property
    def status(self) -> RowStatus:
        return RowStatus.FAILED if self.error_type is not None else RowStatus.SUCCESS

    @property
    def ok(self) -> bool:
        return self.status is RowStatus.SUCCESS

    @staticmethod
    def success(line_number: int, raw_values: tuple[str, ...], line_misses: int = 0) -> RowResult:
        return RowResult(line_number=line_number, raw_values=raw_values, line_misses=line_misses)

    @staticmethod
    def failure(
        line_number: int, raw_values: tuple[str, ...], error_type: str, message: str
    ) -> RowResult:
        return RowResult(
            line_number=line_number,
            raw_values=raw_values,
            error_message=message,
            error_type=error_type,
        )
