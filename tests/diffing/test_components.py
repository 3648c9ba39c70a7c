"""Tests for component set reconciliation."""

from __future__ import annotations

import itertools

from solutiondiff.diffing import ComponentReconciler
from solutiondiff.models import ComponentDiff, ComponentRecord, ComponentStatus


def _records(*pairs: tuple[str, str]) -> list[ComponentRecord]:
    return [ComponentRecord(name=name, type=ctype) for name, ctype in pairs]


def test_reconcile_orders_before_names_then_added() -> None:
    before = _records(("form_b", "60"), ("entity_a", "1"), ("gone", "1"))
    after = _records(("new_one", "20"), ("entity_a", "1"), ("form_b", "61"), ("new_two", "1"))

    diffs = ComponentReconciler().reconcile(before, after)

    assert diffs == [
        ComponentDiff("form_b", "60", ComponentStatus.MODIFIED),
        ComponentDiff("entity_a", "1", ComponentStatus.UNCHANGED),
        ComponentDiff("gone", "1", ComponentStatus.REMOVED),
        ComponentDiff("new_one", "20", ComponentStatus.ADDED),
        ComponentDiff("new_two", "1", ComponentStatus.ADDED),
    ]


def test_reconcile_collapses_duplicate_names() -> None:
    before = _records(("dup", "1"), ("dup", "2"))
    after = _records(("dup", "1"), ("extra", "3"), ("extra", "4"))

    diffs = ComponentReconciler().reconcile(before, after)

    assert diffs == [
        ComponentDiff("dup", "1", ComponentStatus.UNCHANGED),
        ComponentDiff("extra", "3", ComponentStatus.ADDED),
    ]


def test_reconcile_empty_inputs() -> None:
    assert ComponentReconciler().reconcile([], []) == []


def test_reconcile_is_complete_for_every_membership_pattern() -> None:
    universe = [("alpha", "1"), ("beta", "2"), ("gamma", "3"), ("delta", "4")]
    reconciler = ComponentReconciler()

    for size_a in range(len(universe) + 1):
        for subset_a in itertools.combinations(universe, size_a):
            for subset_b in itertools.combinations(universe, 2):
                # Flip gamma's type on the "after" side to exercise modifications.
                after = [(name, "99" if name == "gamma" else ctype) for name, ctype in subset_b]
                diffs = reconciler.reconcile(_records(*subset_a), _records(*after))

                names_a = {name for name, _ in subset_a}
                names_b = {name for name, _ in after}
                names = [diff.name for diff in diffs]
                assert sorted(names) == sorted(names_a | names_b)
                assert len(names) == len(set(names))
                for diff in diffs:
                    if diff.name in names_a and diff.name in names_b:
                        expected = (
                            ComponentStatus.MODIFIED if diff.name == "gamma" else ComponentStatus.UNCHANGED
                        )
                    elif diff.name in names_a:
                        expected = ComponentStatus.REMOVED
                    else:
                        expected = ComponentStatus.ADDED
                    assert diff.status is expected
