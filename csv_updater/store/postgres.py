from __future__ import annotations

from typing import Any

import psycopg2
from psycopg2.extras import Json

from ..errors import LoadError, SaveError
from .base import Record, RecordStore

"""PostgreSQL-backed record store (psycopg2).

Expected table layout (name configurable via records_table):

    CREATE TABLE records (
        record_type text NOT NULL,
        internal_id text NOT NULL,
        body        jsonb NOT NULL DEFAULT '{}',
        sublists    jsonb NOT NULL DEFAULT '{}',
        version     integer NOT NULL DEFAULT 0,
        PRIMARY KEY (record_type, internal_id)
    );

save() is a single versioned UPDATE: zero affected rows means the record was
changed (or deleted) by someone else since load() and is reported as SaveError.
The connection is expected to run in autocommit mode.
"""

__all__ = [
    "PostgresRecordStore",
    "validate_table_name",
]


def validate_table_name(table: str) -> str:
    # alphanumeric and underscores only (identifier is interpolated into SQL)
    if not table or not table.replace("_", "").isalnum():
        raise ValueError(f"invalid table name: {table!r}")
    return table


class PostgresRecordStore(RecordStore):
    def __init__(self, cursor: Any, table: str = "records") -> None:
        self.cursor = cursor
        self.table = validate_table_name(table)

    def load(self, record_type: str, internal_id: Any) -> Record:
        try:
            self.cursor.execute(
                f"SELECT body, sublists, version FROM {self.table} "
                "WHERE record_type = %s AND internal_id = %s",
                (record_type, str(internal_id)),
            )
            row = self.cursor.fetchone()
        except psycopg2.Error as e:
            raise LoadError(f"failed loading {record_type} {internal_id}: {e}") from e
        if row is None:
            raise LoadError(f"Record not found: {record_type} {internal_id}")
        body, sublists, version = row
        return Record(record_type, internal_id, body or {}, sublists or {}, version=version)

    def save(self, record: Record) -> None:
        try:
            self.cursor.execute(
                f"UPDATE {self.table} SET body = %s, sublists = %s, version = version + 1 "
                "WHERE record_type = %s AND internal_id = %s AND version = %s",
                (
                    Json(record.body),
                    Json(record.sublists),
                    record.record_type,
                    str(record.internal_id),
                    record.version,
                ),
            )
        except psycopg2.Error as e:
            raise SaveError(f"failed saving {record.record_type} {record.internal_id}: {e}") from e
        if self.cursor.rowcount != 1:
            raise SaveError(
                f"Record has been changed since it was loaded: "
                f"{record.record_type} {record.internal_id}"
            )
        record.version += 1
