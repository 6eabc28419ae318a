from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.header_schema import HeaderSchema
from ..models.row_result import RowResult

"""Result report (output CSV) rendering.

Header = input columns + error_message, then one line per processed data row in
the order received. Fields are echoed in their original text form and joined with
", ".
"""

__all__ = [
    "ERROR_COLUMN",
    "render_header_line",
    "render_result_line",
    "assemble_report",
    "output_filename",
    "write_report",
]

ERROR_COLUMN = "error_message"
SEPARATOR = ", "


def render_header_line(schema: HeaderSchema) -> str:
    return SEPARATOR.join([*schema.columns, ERROR_COLUMN])


def render_result_line(result: RowResult) -> str:
    return SEPARATOR.join([*result.raw_values, result.error_message])


def assemble_report(schema: HeaderSchema, results: Iterable[RowResult]) -> str:
    lines = [render_header_line(schema)]
    lines.extend(render_result_line(r) for r in results)
    return "\n".join(lines) + "\n"


def output_filename(input_name: str, now: datetime | None = None) -> str:
    """Derive the report name: input stem + '_' + unix seconds + '.csv'.

    >>> from datetime import timezone
    >>> output_filename("Fixes.CSV", datetime(2024, 1, 1, tzinfo=timezone.utc))
    'Fixes_1704067200.csv'
    """
    stem = input_name[:-4] if input_name.lower().endswith(".csv") else input_name
    moment = now or datetime.now(UTC)
    return f"{stem}_{int(moment.timestamp())}.csv"


def write_report(
    schema: HeaderSchema,
    results: Iterable[RowResult],
    folder: Path,
    input_name: str,
    now: datetime | None = None,
) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / output_filename(input_name, now)
    path.write_text(assemble_report(schema, results), encoding="utf-8")
    return path
