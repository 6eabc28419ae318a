from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .row_result import RowResult

"""Aggregated import result for the CSV record updater.

Collects the per-row outcomes of one run and the metrics printed on the SUMMARY line.
"""

__all__ = [
    "ImportResult",
]


@dataclass(frozen=True)
class ImportResult:
    """Aggregated results and summary metrics for one import run."""
    total_rows: int  # Data rows that produced a RowResult
    success_rows: int
    failed_rows: int
    skipped_rows: int  # Blank lines and repeated header lines
    line_misses: int  # Sublist fields skipped because no line matched
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    output_path: Path | None = None
    rows: list[RowResult] | None = None

    @property
    def has_failures(self) -> bool:
        return self.failed_rows > 0
