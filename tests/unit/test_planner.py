from __future__ import annotations

import pytest

from csv_updater.errors import MissingLineIdError
from csv_updater.models.operations import SelectLine, SelectSublist, SetBodyField, SetSublistField
from csv_updater.services.planner import plan_mutations


def test_body_fields_only():
    ops = plan_mutations(
        ("internal_id", "record_type", "companyname", "email"),
        {"internal_id": 1, "record_type": "customer", "companyname": "Acme Corp", "email": None},
    )
    assert ops == [SetBodyField("companyname", "Acme Corp")]


def test_sublist_line_field():
    columns = ("internal_id", "record_type", "sublist_name", "line_id", "item")
    ops = plan_mutations(
        columns,
        {"internal_id": 1, "record_type": "salesorder", "sublist_name": "item", "line_id": 5, "item": 101},
    )
    assert ops == [
        SelectSublist("item"),
        SelectLine(5),
        SetSublistField("item", 101),
    ]


def test_body_fields_before_sublist_and_line_fields_after():
    columns = ("internal_id", "record_type", "memo", "sublist_name", "line_id", "quantity", "rate")
    ops = plan_mutations(
        columns,
        {
            "internal_id": 1,
            "record_type": "salesorder",
            "memo": "fix",
            "sublist_name": "item",
            "line_id": 6,
            "quantity": 3,
            "rate": None,
        },
    )
    assert [type(op) for op in ops] == [SetBodyField, SelectSublist, SelectLine, SetSublistField]
    assert ops[0] == SetBodyField("memo", "fix")
    assert ops[-1].field == "quantity"


def test_sublist_field_without_line_id_fails():
    columns = ("internal_id", "record_type", "sublist_name", "item")
    with pytest.raises(MissingLineIdError, match="inside sublist item"):
        plan_mutations(columns, {"internal_id": 1, "record_type": "salesorder", "sublist_name": "item", "item": 3})


def test_null_line_id_counts_as_missing():
    columns = ("internal_id", "record_type", "sublist_name", "line_id", "item")
    with pytest.raises(MissingLineIdError):
        plan_mutations(
            columns,
            {"internal_id": 1, "record_type": "salesorder", "sublist_name": "item", "line_id": None, "item": 3},
        )


def test_field_before_sublist_columns_is_a_body_field():
    # "item" precedes sublist_name, so no sublist context exists yet
    columns = ("internal_id", "record_type", "item", "sublist_name", "line_id")
    ops = plan_mutations(
        columns,
        {"internal_id": 1, "record_type": "salesorder", "item": 7, "sublist_name": "item", "line_id": 5},
    )
    assert ops[0] == SetBodyField("item", 7)


def test_state_does_not_leak_between_rows():
    columns = ("internal_id", "record_type", "sublist_name", "line_id", "companyname")
    plan_mutations(columns, {"internal_id": 1, "record_type": "x", "sublist_name": "item", "line_id": 1})
    ops = plan_mutations(columns, {"internal_id": 1, "record_type": "x", "companyname": "Acme"})
    assert ops == [SelectSublist(None), SelectLine(None), SetBodyField("companyname", "Acme")]
