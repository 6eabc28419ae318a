from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any

from ..csvfile.reader import coerce_value
from ..errors import FieldError

"""Record handle and record store interface.

A Record is a mutable, detached copy of one stored record: flat body fields plus
named sublists of line dicts. Stores hand out Records from load() and persist them
in save(). The version counter supports optimistic concurrency: a save based on a
stale version is rejected by the store.
"""

__all__ = [
    "Record",
    "RecordStore",
]


def _same_value(a: Any, b: Any) -> bool:
    # bool is a subclass of int; True must not match line 1
    return type(a) is type(b) and a == b


class Record:
    """Mutable handle on a single record.

    Parameters
    ----------
    record_type / internal_id: record identity
    body: flat field values
    sublists: sublist name -> list of line dicts
    version: store version the handle was loaded at
    fields: allowed body field names (None = any)
    sublist_fields: sublist name -> allowed line field names (missing entry = any)
    """

    def __init__(
        self,
        record_type: str,
        internal_id: Any,
        body: dict[str, Any] | None = None,
        sublists: dict[str, list[dict[str, Any]]] | None = None,
        *,
        version: int = 0,
        fields: set[str] | None = None,
        sublist_fields: dict[str, set[str]] | None = None,
    ) -> None:
        self.record_type = record_type
        self.internal_id = internal_id
        self.body: dict[str, Any] = copy.deepcopy(body) if body else {}
        self.sublists: dict[str, list[dict[str, Any]]] = copy.deepcopy(sublists) if sublists else {}
        self.version = version
        self.fields = fields
        self.sublist_fields = sublist_fields or {}

    def __repr__(self) -> str:  # pragma: no cover (debug aid)
        return f"Record({self.record_type!r}, {self.internal_id!r}, version={self.version})"

    def get_value(self, field: str) -> Any:
        return self.body.get(field)

    def set_value(self, field: str, value: Any) -> None:
        if self.fields is not None and field not in self.fields:
            raise FieldError(f"Invalid field '{field}' for record type '{self.record_type}'")
        self.body[field] = value

    def _lines(self, sublist: str) -> list[dict[str, Any]]:
        try:
            return self.sublists[sublist]
        except KeyError:
            raise FieldError(
                f"Invalid sublist '{sublist}' for record type '{self.record_type}'"
            ) from None

    def find_sublist_line(self, sublist: str, key_field: str, value: Any) -> int | None:
        """Return the index of the first line whose key field equals value, else None.

        Stored text values are coerced like input values before comparison.
        """
        for index, line in enumerate(self._lines(sublist)):
            if _same_value(coerce_value(line.get(key_field)), value):
                return index
        return None

    def get_sublist_value(self, sublist: str, field: str, line: int) -> Any:
        return self._lines(sublist)[line].get(field)

    def set_sublist_value(self, sublist: str, field: str, line: int, value: Any) -> None:
        lines = self._lines(sublist)
        allowed = self.sublist_fields.get(sublist)
        if allowed is not None and field not in allowed:
            raise FieldError(f"Invalid field '{field}' for sublist '{sublist}'")
        if not 0 <= line < len(lines):
            raise FieldError(f"Invalid line {line} for sublist '{sublist}'")
        lines[line][field] = value


class RecordStore(ABC):
    """Storage of records addressed by (record_type, internal_id)."""

    @abstractmethod
    def load(self, record_type: str, internal_id: Any) -> Record:
        """Return a detached Record. Raises LoadError when missing or invalid."""

    @abstractmethod
    def save(self, record: Record) -> None:
        """Persist the Record. Raises SaveError on any store rejection."""
