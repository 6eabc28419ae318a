from __future__ import annotations

from ..models.processing_result import ImportResult

"""SUMMARY line rendering for the CSV record updater."""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(result: ImportResult) -> str:
    """Render a SUMMARY line from an ImportResult.

    Format:
    SUMMARY rows={total} success={success} failed={failed} skipped={skipped}
    line_misses={misses} elapsed_sec={elapsed} throughput_rps={throughput} output={path}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ImportResult(
        ...     total_rows=10, success_rows=9, failed_rows=1, skipped_rows=0,
        ...     line_misses=0, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=5.0
        ... )
        >>> render_summary_line(result)
        'SUMMARY rows=10 success=9 failed=1 skipped=0 line_misses=0 elapsed_sec=2 throughput_rps=5 output=-'
    """
    output = str(result.output_path) if result.output_path is not None else "-"
    return (
        f"SUMMARY rows={result.total_rows} "
        f"success={result.success_rows} "
        f"failed={result.failed_rows} "
        f"skipped={result.skipped_rows} "
        f"line_misses={result.line_misses} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)} "
        f"output={output}"
    )
