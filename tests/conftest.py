# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest

from csv_updater.logging.init import LOGGER_NAME, reset_logging
from csv_updater.store.memory import InMemoryRecordStore


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """input_file: ./data/changes.csv
output_folder: ./output
line_key_field: line
records_table: records
error_log_dir: ./logs
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_csv(temp_workdir: Path):
    def _write(text: str, name: str = "changes.csv") -> Path:
        path = temp_workdir / "data" / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def store() -> InMemoryRecordStore:
    """Store seeded with a customer and a sales order with two item lines."""
    s = InMemoryRecordStore()
    s.add("customer", 1, {"companyname": "Old Name", "email": "old@example.com"})
    s.add("customer", 2, {"companyname": "Beta"})
    s.add(
        "salesorder",
        1,
        {"memo": ""},
        {
            "item": [
                {"line": 5, "item": 100, "quantity": 1},
                {"line": 6, "item": 200, "quantity": 2},
            ],
            "shipgroup": [{"line": "1", "shipmethod": "ground"}],
        },
    )
    return s


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()
    # handlers hold the per-test captured stdout
    for name in (LOGGER_NAME, "csv_updater"):
        lg = logging.getLogger(name)
        for h in lg.handlers[:]:
            lg.removeHandler(h)
        lg.propagate = True
        lg.setLevel(logging.NOTSET)
