from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..csvfile.reader import coerce_value
from ..errors import LoadError, MissingLineIdError
from ..models.operations import (
    Operation,
    SelectLine,
    SelectSublist,
    SetBodyField,
    SetSublistField,
)
from ..models.row_data import TypedValue
from ..store.base import RecordStore

"""Record mutation: apply a planned operation list to one record.

Load -> apply in order -> save. Every failure aborts the row except a sublist
line lookup that matches nothing: that field is skipped, logged, and the row
continues (and is still saved).
"""

__all__ = [
    "DEFAULT_LINE_KEY_FIELD",
    "LineMiss",
    "MutationOutcome",
    "apply_operations",
]

DEFAULT_LINE_KEY_FIELD = "line"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineMiss:
    sublist: str
    line_key: TypedValue
    field: str


@dataclass
class MutationOutcome:
    applied: int = 0  # Field updates written to the record
    misses: list[LineMiss] = field(default_factory=list)


def apply_operations(
    store: RecordStore,
    record_type: TypedValue,
    internal_id: TypedValue,
    operations: Iterable[Operation],
    *,
    line_key_field: str = DEFAULT_LINE_KEY_FIELD,
) -> MutationOutcome:
    """Apply operations to the record (record_type, internal_id) and save it.

    Raises:
        LoadError: identity missing, record not found or type invalid
        FieldError: the record rejected a field update
        SaveError: the store rejected the save
    """
    if record_type is None or internal_id is None:
        raise LoadError("Missing record_type or internal_id")
    if not isinstance(record_type, str):
        raise LoadError(f"Invalid record type '{record_type}'")

    record = store.load(record_type, internal_id)
    outcome = MutationOutcome()
    sublist: TypedValue = None
    line_key: TypedValue = None

    for op in operations:
        if isinstance(op, SetBodyField):
            record.set_value(op.field, op.value)
            outcome.applied += 1
        elif isinstance(op, SelectSublist):
            sublist = op.name
        elif isinstance(op, SelectLine):
            line_key = op.key
        elif isinstance(op, SetSublistField):
            if sublist is None or line_key is None:
                raise MissingLineIdError(
                    f"Missing line ID for sublist - but inside sublist {sublist}"
                )
            index = record.find_sublist_line(str(sublist), line_key_field, coerce_value(line_key))
            if index is None:
                logger.warning(
                    "Unable to locate line %s in sublist %s of %s %s (field %s skipped)",
                    line_key,
                    sublist,
                    record_type,
                    internal_id,
                    op.field,
                )
                outcome.misses.append(LineMiss(str(sublist), line_key, op.field))
                continue
            record.set_sublist_value(str(sublist), op.field, index, op.value)
            outcome.applied += 1
        else:  # pragma: no cover - closed set of operation types
            raise TypeError(f"unknown operation: {op!r}")

    store.save(record)
    logger.debug(
        "saved %s %s applied=%d misses=%d",
        record_type,
        internal_id,
        outcome.applied,
        len(outcome.misses),
    )
    return outcome
