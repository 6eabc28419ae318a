from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..errors import LoadError, SaveError
from .base import Record, RecordStore

"""Dict-backed record store.

Used by the test-suite and by the CLI mock mode (DISABLE_DB_CONNECT=1). Loads
return deep copies so that a failed row never leaks partial edits into the store.
"""

__all__ = [
    "InMemoryRecordStore",
]


@dataclass
class _StoredRecord:
    body: dict[str, Any]
    sublists: dict[str, list[dict[str, Any]]]
    version: int = 0
    fields: set[str] | None = None
    sublist_fields: dict[str, set[str]] = field(default_factory=dict)


class InMemoryRecordStore(RecordStore):
    """In-memory RecordStore with optimistic version checks.

    record_types: when given, loads of any other type fail with LoadError.
    """

    def __init__(self, record_types: Iterable[str] | None = None) -> None:
        self._records: dict[tuple[str, str], _StoredRecord] = {}
        self.record_types = set(record_types) if record_types is not None else None
        self.save_count = 0

    @staticmethod
    def _key(record_type: Any, internal_id: Any) -> tuple[str, str]:
        return (str(record_type), str(internal_id))

    def add(
        self,
        record_type: str,
        internal_id: Any,
        body: dict[str, Any] | None = None,
        sublists: dict[str, list[dict[str, Any]]] | None = None,
        *,
        fields: set[str] | None = None,
        sublist_fields: dict[str, set[str]] | None = None,
    ) -> None:
        self._records[self._key(record_type, internal_id)] = _StoredRecord(
            body=copy.deepcopy(body or {}),
            sublists=copy.deepcopy(sublists or {}),
            fields=fields,
            sublist_fields=sublist_fields or {},
        )

    def load(self, record_type: str, internal_id: Any) -> Record:
        if self.record_types is not None and record_type not in self.record_types:
            raise LoadError(f"Invalid record type '{record_type}'")
        stored = self._records.get(self._key(record_type, internal_id))
        if stored is None:
            raise LoadError(f"Record not found: {record_type} {internal_id}")
        return Record(
            record_type,
            internal_id,
            stored.body,
            stored.sublists,
            version=stored.version,
            fields=stored.fields,
            sublist_fields=stored.sublist_fields,
        )

    def save(self, record: Record) -> None:
        stored = self._records.get(self._key(record.record_type, record.internal_id))
        if stored is None:
            raise SaveError(f"Record not found: {record.record_type} {record.internal_id}")
        if stored.version != record.version:
            raise SaveError(
                f"Record has been changed since it was loaded: "
                f"{record.record_type} {record.internal_id}"
            )
        stored.body = copy.deepcopy(record.body)
        stored.sublists = copy.deepcopy(record.sublists)
        stored.version += 1
        record.version = stored.version
        self.save_count += 1
