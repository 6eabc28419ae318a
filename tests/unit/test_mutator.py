from __future__ import annotations

import pytest

from csv_updater.errors import FieldError, LoadError, SaveError
from csv_updater.models.operations import SelectLine, SelectSublist, SetBodyField, SetSublistField
from csv_updater.services.mutator import LineMiss, apply_operations
from csv_updater.store.memory import InMemoryRecordStore


def _sublist_ops(sublist, key, field, value):
    return [SelectSublist(sublist), SelectLine(key), SetSublistField(field, value)]


def test_set_body_field_and_save(store: InMemoryRecordStore):
    outcome = apply_operations(store, "customer", 1, [SetBodyField("companyname", "Acme Corp")])
    assert outcome.applied == 1
    assert outcome.misses == []
    assert store.load("customer", 1).get_value("companyname") == "Acme Corp"
    # untouched fields stay
    assert store.load("customer", 1).get_value("email") == "old@example.com"


def test_sublist_line_resolved_by_key_not_position(store: InMemoryRecordStore):
    apply_operations(store, "salesorder", 1, _sublist_ops("item", 6, "item", 101))
    rec = store.load("salesorder", 1)
    assert rec.get_sublist_value("item", "item", 0) == 100
    assert rec.get_sublist_value("item", "item", 1) == 101


def test_stored_text_key_matches_integer_line_id(store: InMemoryRecordStore):
    # shipgroup line keys are stored as text "1"
    apply_operations(store, "salesorder", 1, _sublist_ops("shipgroup", 1, "shipmethod", "air"))
    assert store.load("salesorder", 1).get_sublist_value("shipgroup", "shipmethod", 0) == "air"


def test_line_miss_is_soft_and_record_still_saved(store: InMemoryRecordStore):
    ops = [SetBodyField("memo", "checked"), *_sublist_ops("item", 99, "quantity", 4)]
    outcome = apply_operations(store, "salesorder", 1, ops)
    assert outcome.misses == [LineMiss("item", 99, "quantity")]
    assert outcome.applied == 1
    rec = store.load("salesorder", 1)
    assert rec.get_value("memo") == "checked"
    assert [line["quantity"] for line in rec.sublists["item"]] == [1, 2]


def test_custom_line_key_field():
    s = InMemoryRecordStore()
    s.add("invoice", 3, sublists={"item": [{"lineuniquekey": "A1", "rate": 1}]})
    apply_operations(s, "invoice", 3, _sublist_ops("item", "A1", "rate", 9), line_key_field="lineuniquekey")
    assert s.load("invoice", 3).get_sublist_value("item", "rate", 0) == 9


def test_boolean_key_does_not_match_line_one():
    s = InMemoryRecordStore()
    s.add("salesorder", 1, sublists={"item": [{"line": 1, "rate": 1}]})
    outcome = apply_operations(s, "salesorder", 1, _sublist_ops("item", True, "rate", 5))
    assert len(outcome.misses) == 1


def test_record_not_found(store: InMemoryRecordStore):
    with pytest.raises(LoadError, match="not found"):
        apply_operations(store, "customer", 404, [SetBodyField("companyname", "x")])


@pytest.mark.parametrize("record_type, internal_id", [(None, 1), ("customer", None), (12, 1)])
def test_missing_or_invalid_identity(store: InMemoryRecordStore, record_type, internal_id):
    with pytest.raises(LoadError):
        apply_operations(store, record_type, internal_id, [])


def test_invalid_record_type_rejected_by_store():
    s = InMemoryRecordStore(record_types={"customer"})
    with pytest.raises(LoadError, match="Invalid record type"):
        apply_operations(s, "widget", 1, [])


def test_field_error_aborts_row_without_saving():
    s = InMemoryRecordStore()
    s.add("customer", 1, {"companyname": "Old"}, fields={"companyname"})
    with pytest.raises(FieldError):
        apply_operations(s, "customer", 1, [SetBodyField("companyname", "New"), SetBodyField("bogus", 1)])
    assert s.load("customer", 1).get_value("companyname") == "Old"
    assert s.save_count == 0


def test_unknown_sublist_is_field_error(store: InMemoryRecordStore):
    with pytest.raises(FieldError, match="Invalid sublist"):
        apply_operations(store, "salesorder", 1, _sublist_ops("nosuch", 5, "item", 1))


def test_stale_version_is_save_error(store: InMemoryRecordStore):
    stale = store.load("customer", 2)
    apply_operations(store, "customer", 2, [SetBodyField("companyname", "Gamma")])
    with pytest.raises(SaveError, match="changed since it was loaded"):
        store.save(stale)
