from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from ..errors import MissingLineIdError
from ..models.operations import (
    Operation,
    SelectLine,
    SelectSublist,
    SetBodyField,
    SetSublistField,
)
from ..models.row_data import TypedValue

"""Mutation planning: typed row -> ordered list of operations.

Columns are walked in header order. `sublist_name` and `line_id` switch the
addressing context for the columns that follow; every other non-null column becomes
a body field update (no sublist yet) or a sublist line field update.
"""

__all__ = [
    "IDENTITY_COLUMNS",
    "SUBLIST_COLUMN",
    "LINE_COLUMN",
    "plan_mutations",
]

IDENTITY_COLUMNS = frozenset({"internal_id", "record_type"})
SUBLIST_COLUMN = "sublist_name"
LINE_COLUMN = "line_id"


@dataclass
class _LineContext:
    """Per-row addressing state, discarded when the row is planned."""
    sublist: TypedValue = None
    line: TypedValue = None


def plan_mutations(
    columns: Sequence[str], values: Mapping[str, TypedValue]
) -> list[Operation]:
    """Plan the operations for one row.

    Args:
        columns: Schema column names in declared order
        values: Typed row (absent columns count as null)

    Raises:
        MissingLineIdError: a sublist field appears before a line_id is known
    """
    ctx = _LineContext()
    ops: list[Operation] = []
    for column in columns:
        value = values.get(column)
        if column in IDENTITY_COLUMNS:
            continue
        if column == SUBLIST_COLUMN:
            # switching sublists keeps the current line id
            ctx.sublist = value
            ops.append(SelectSublist(value))
            continue
        if column == LINE_COLUMN:
            ctx.line = value
            ops.append(SelectLine(value))
            continue
        if value is None:
            continue
        if ctx.sublist is None:
            ops.append(SetBodyField(column, value))
        elif ctx.line is None:
            raise MissingLineIdError(
                f"Missing line ID for sublist - but inside sublist {ctx.sublist}"
            )
        else:
            ops.append(SetSublistField(column, value))
    return ops
