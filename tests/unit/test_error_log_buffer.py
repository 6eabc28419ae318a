from __future__ import annotations

import json
from pathlib import Path

from csv_updater.logging.error_log import ErrorLogBuffer, ErrorRecord


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("changes.csv", 2, "RECORD_LOAD_ERROR", "Record not found"))
    buf.append(ErrorRecord.create("changes.csv", 5, "LINE_NOT_FOUND", "Unable to locate line 9"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent.resolve() == (temp_workdir / "logs").resolve()
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        obj = json.loads(raw)
        assert set(obj.keys()) == {"timestamp", "file", "row", "error_type", "message"}
    # flush clears the buffer
    assert len(buf) == 0


def test_error_log_buffer_multiple_flushes(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "errs")
    buf.append(ErrorRecord.create("f.csv", 1, "FIELD_ERROR", "bad"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("f.csv", 2, "FIELD_ERROR", "bad2"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_error_log_buffer_empty_flush_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "errs")
    assert buf.flush() is None
    assert not (tmp_path / "errs").exists()
