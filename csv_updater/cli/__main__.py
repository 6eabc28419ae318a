from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from ..config.loader import ConfigError, ImportConfig, load_config
from ..csvfile.reader import parse_row, read_header, read_lines
from ..errors import RowError, SchemaError
from ..logging.init import log_summary, set_debug, setup_logging
from ..services.orchestrator import ProcessingError, run_import
from ..services.planner import plan_mutations
from ..services.summary import render_summary_line
from ..store.base import RecordStore
from ..store.memory import InMemoryRecordStore
from ..store.postgres import PostgresRecordStore

"""CLI entrypoint.

Flow: load .env -> load config -> open record store -> run_import -> SUMMARY line.
Exit codes: 0 every row succeeded, 2 some rows failed, 1 fatal (config, input,
header or database connection).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

DEFAULT_CONFIG_PATH = Path("config/import.yml")
INSPECT_ROWS = 3


def _build_dsn(cfg: ImportConfig) -> str:
    """Resolve the connection string.

    Priority:
        1. DATABASE_URL / PGDSN environment variables (whole DSN)
        2. config `database.dsn`
        3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, falling back to
           the individual `database` config keys
    """
    db_cfg = cfg.database
    dsn_env = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn_env:
        return dsn_env
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _record_store(cfg: ImportConfig) -> Iterator[RecordStore]:  # pragma: no cover (thin wrapper; tested via patching)
    """Yield the record store for this run.

    DISABLE_DB_CONNECT=1 selects mock mode: an empty in-memory store, so every
    row fails to load but header and row format problems are still reported.
    """
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        yield InMemoryRecordStore()
        return

    conn = psycopg2.connect(_build_dsn(cfg))
    # one versioned UPDATE per row; rows commit independently
    conn.autocommit = True
    cur = conn.cursor()
    try:
        yield PostgresRecordStore(cur, table=cfg.records_table)
    finally:
        cur.close()
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; existing variables are overridden."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Bulk-update records from a CSV of changes")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to import.yml")
    p.add_argument("--input", help="Input CSV (overrides input_file from the config)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data",
        action="store_true",
        help="Print the header and the planned operations of the first rows, then exit",
    )
    return p.parse_args(argv)


def _inspect_data(cfg: ImportConfig) -> int:
    path = Path(cfg.input_file)
    if not path.is_file():
        print(f"inspect: input file not found: {path}")
        return EXIT_FATAL
    try:
        schema, data_lines = read_header(read_lines(path))
    except SchemaError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {path.name}")
    print(f"  columns={list(schema.columns)}")
    shown = 0
    for line_number, line in data_lines:
        if shown >= INSPECT_ROWS:
            break
        if not line.strip():
            continue
        try:
            row = parse_row(schema, line, line_number)
            if row is None:
                continue
            ops = plan_mutations(schema.columns, row.values)
        except RowError as e:
            print(f"  line={line_number} error={e}")
        else:
            print(f"  line={line_number} record={row.record_type}:{row.internal_id} ops={ops}")
        shown += 1
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only read sys.argv when no explicit list was given (tests pass [])
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if args.input:
        cfg = cfg.with_input(args.input)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        with _record_store(cfg) as store:
            result = run_import(cfg, store)
    except (ProcessingError, SchemaError) as e:
        logger.error(f"import: {e}")
        return EXIT_FATAL
    except psycopg2.Error as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL

    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.has_failures:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
