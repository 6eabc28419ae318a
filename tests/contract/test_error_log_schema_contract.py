from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from csv_updater.config.loader import load_config
from csv_updater.services.orchestrator import run_import

"""Error log JSON Lines contract: fixed keys, no extras."""

ERROR_LOG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["timestamp", "file", "row", "error_type", "message"],
    "properties": {
        "timestamp": {"type": "string", "pattern": "Z$"},
        "file": {"type": "string"},
        "row": {"type": "integer", "minimum": -1},
        "error_type": {"type": "string", "pattern": "^[A-Z][A-Z_]*$"},
        "message": {"type": "string"},
    },
}


def test_error_log_schema_rejects_extra_key():
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "file": "changes.csv",
        "row": 2,
        "error_type": "RECORD_LOAD_ERROR",
        "message": "Record not found: customer 9",
        "extra": "not allowed",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, ERROR_LOG_SCHEMA)


def test_run_writes_contract_conforming_lines(temp_workdir: Path, write_config: Path, write_csv, store):
    write_csv(
        "internal_id,record_type,sublist_name,line_id,quantity\n"
        "1,salesorder,item,42,3\n"
        "9,salesorder,item,5,3\n"
        "x\n"
        "1,salesorder,item,,3\n"
    )
    run_import(load_config(write_config), store)
    (log_path,) = (temp_workdir / "logs").glob("errors-*.log")
    records = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    for rec in records:
        jsonschema.validate(rec, ERROR_LOG_SCHEMA)
    assert [(r["row"], r["error_type"]) for r in records] == [
        (2, "LINE_NOT_FOUND"),
        (3, "RECORD_LOAD_ERROR"),
        (4, "INVALID_FORMAT"),
        (5, "MISSING_LINE_ID"),
    ]
    assert {r["file"] for r in records} == {"changes.csv"}
