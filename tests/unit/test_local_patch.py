# -*- coding: utf-8 -*-
"""
Test Local Patch

Edições locais aplicadas sobre a lista em cache, sem ida ao Transaction Store.
"""

from datetime import date
from decimal import Decimal

from pinee.schemas.period import DateRange
from pinee.services.aggregation import aggregate, apply_local_patch, remove_local

FEBRUARY = DateRange(start=date(2024, 2, 1), end=date(2024, 2, 29), label="2024-02")


def test_replaces_in_place_preserving_order(make_record):
    a, b, c = make_record(id="a"), make_record(id="b"), make_record(id="c")
    changed = b.model_copy(update={"amount": Decimal("999")})

    patched = apply_local_patch([a, b, c], changed, FEBRUARY)

    assert [r.id for r in patched] == ["a", "b", "c"]
    assert patched[1].amount == Decimal("999")


def test_appends_new_record(make_record):
    a = make_record(id="a")
    new = make_record(id="new", date="2024-02-20")

    patched = apply_local_patch([a], new, FEBRUARY)

    assert [r.id for r in patched] == ["a", "new"]


def test_record_moved_out_of_range_is_removed(make_record):
    a, b = make_record(id="a"), make_record(id="b")
    moved = b.model_copy(update={"date": "2024-03-01"})

    patched = apply_local_patch([a, b], moved, FEBRUARY)

    assert [r.id for r in patched] == ["a"]


def test_out_of_range_unknown_record_is_ignored(make_record):
    a = make_record(id="a")
    patched = apply_local_patch([a], make_record(id="z", date="2023-12-31"), FEBRUARY)
    assert patched == [a]


def test_input_list_is_not_mutated(make_record):
    current = [make_record(id="a")]
    apply_local_patch(current, make_record(id="b"), FEBRUARY)
    assert [r.id for r in current] == ["a"]


def test_totals_change_only_after_reaggregation(make_record):
    paid = make_record(id="a", type="expense", status="unpaid", amount=40)
    current = [paid]
    before = aggregate(current)

    patched = apply_local_patch(current, paid.model_copy(update={"status": "paid"}), FEBRUARY)
    after = aggregate(patched)

    assert before.expense_pending == Decimal("40")
    assert after.expense_paid == Decimal("40")
    assert after.expense_pending == 0


def test_remove_local(make_record):
    a, b = make_record(id="a"), make_record(id="b")
    assert [r.id for r in remove_local([a, b], "a")] == ["b"]
    assert remove_local([a, b], None) == [a, b]
