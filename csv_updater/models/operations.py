from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .row_data import TypedValue

"""Mutation operations planned for a single row.

Operations are emitted in column order. SelectSublist / SelectLine set the
addressing context consumed by the SetSublistField operations that follow them.
"""

__all__ = [
    "SetBodyField",
    "SelectSublist",
    "SelectLine",
    "SetSublistField",
    "Operation",
]


@dataclass(frozen=True)
class SetBodyField:
    field: str
    value: TypedValue


@dataclass(frozen=True)
class SelectSublist:
    name: TypedValue


@dataclass(frozen=True)
class SelectLine:
    key: TypedValue


@dataclass(frozen=True)
class SetSublistField:
    field: str
    value: TypedValue


Operation = Union[SetBodyField, SelectSublist, SelectLine, SetSublistField]
