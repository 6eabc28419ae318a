from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ImportConfig
from ..csvfile.reader import parse_row, read_header, read_lines
from ..csvfile.report import write_report
from ..errors import RowError
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.header_schema import HeaderSchema, split_fields
from ..models.processing_result import ImportResult
from ..models.row_result import RowResult
from ..store.base import RecordStore
from .mutator import DEFAULT_LINE_KEY_FIELD, apply_operations
from .planner import plan_mutations
from .progress import ProgressTracker

"""Service orchestration for the CSV record updater.

run_import() drives one job: read the input, build the header schema (fatal on
failure), process every data row in isolation, write the result report and flush
the error log. process_row() is the row boundary: nothing raised while handling a
row escapes it.
"""

__all__ = [
    "ProcessingError",
    "process_row",
    "run_import",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal job-level error (missing input, unreadable file)."""


def _single_line(message: str) -> str:
    # one report line per data row; driver errors carry DETAIL/HINT lines
    return " ".join(message.split())


def process_row(
    schema: HeaderSchema,
    raw_line: str,
    store: RecordStore,
    *,
    line_number: int = 0,
    file_name: str = "",
    error_log: ErrorLogBuffer | None = None,
    line_key_field: str = DEFAULT_LINE_KEY_FIELD,
) -> RowResult | None:
    """Process one data line. Returns None for a repeated header line."""
    raw_values = tuple(split_fields(raw_line))
    try:
        row = parse_row(schema, raw_line, line_number)
        if row is None:
            logger.debug("line=%d repeated header skipped", line_number)
            return None
        logger.debug("line=%d row=%s", line_number, row.values)
        operations = plan_mutations(schema.columns, row.values)
        outcome = apply_operations(
            store,
            row.record_type,
            row.internal_id,
            operations,
            line_key_field=line_key_field,
        )
    except RowError as e:
        message = _single_line(str(e)) or e.error_type
        logger.error("Unable to import row %d: %s", line_number, message)
        if error_log is not None:
            error_log.append(ErrorRecord.create(file_name, line_number, e.error_type, message))
        return RowResult.failure(line_number, raw_values, e.error_type, message)
    except Exception as e:
        logger.exception("Unexpected error on row %d", line_number)
        message = _single_line(str(e)) or type(e).__name__
        if error_log is not None:
            error_log.append(ErrorRecord.create(file_name, line_number, "UNEXPECTED_ERROR", message))
        return RowResult.failure(line_number, raw_values, "UNEXPECTED_ERROR", message)

    if error_log is not None:
        for miss in outcome.misses:
            error_log.append(
                ErrorRecord.create(
                    file_name,
                    line_number,
                    "LINE_NOT_FOUND",
                    f"Unable to locate line {miss.line_key} in sublist {miss.sublist} "
                    f"(field {miss.field} not set)",
                )
            )
    return RowResult.success(line_number, raw_values, line_misses=len(outcome.misses))


def run_import(
    config: ImportConfig,
    store: RecordStore,
    *,
    now: datetime | None = None,
) -> ImportResult:
    """Run one import job.

    Raises:
        ProcessingError: input file setting missing, file absent or unreadable
        SchemaError: header line missing or lacking required columns
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(Path(config.error_log_dir))

    if not config.input_file:
        raise ProcessingError("Missing CSV file")
    input_path = Path(config.input_file)
    if not input_path.is_file():
        raise ProcessingError(f"Input file not found: {input_path}")
    logger.info("Begin CSV import: %s", input_path)

    try:
        lines = read_lines(input_path)
    except (OSError, UnicodeDecodeError) as e:
        raise ProcessingError(f"Error reading {input_path}: {e}") from e

    schema, data_lines = read_header(lines)
    data_lines = list(data_lines)
    logger.debug("header columns=%s data_lines=%d", list(schema.columns), len(data_lines))

    results: list[RowResult] = []
    skipped = 0
    failed = 0
    misses = 0
    with ProgressTracker(len(data_lines)) as progress:
        for line_number, line in data_lines:
            if not line.strip():
                skipped += 1
                progress.finish_row()
                continue
            result = process_row(
                schema,
                line,
                store,
                line_number=line_number,
                file_name=input_path.name,
                error_log=error_log,
                line_key_field=config.line_key_field,
            )
            if result is None:
                skipped += 1
            else:
                results.append(result)
                misses += result.line_misses
                if not result.ok:
                    failed += 1
            progress.finish_row(success=result is None or result.ok)

    output_path = write_report(
        schema, results, Path(config.output_folder), input_path.name, now=now
    )
    logger.info("Output file: %s", output_path)

    try:
        log_path = error_log.flush()
    except OSError as e:
        # report already written
        logger.warning("failed writing error log: %s", e)
    else:
        if log_path is not None:
            logger.info("Error log: %s", log_path)

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput = len(results) / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ImportResult(
        total_rows=len(results),
        success_rows=len(results) - failed,
        failed_rows=failed,
        skipped_rows=skipped,
        line_misses=misses,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput,
        output_path=output_path,
        rows=results,
    )
