"""Reconciles the component lists of two descriptors by name."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..models import ComponentDiff, ComponentRecord, ComponentStatus


class ComponentReconciler:
    """Classifies every distinct component name as added, removed, modified or unchanged.

    Output order is stable: names from the "before" list in their original
    order, then names that only appear in the "after" list, in theirs.
    """

    def reconcile(
        self,
        before: Sequence[ComponentRecord],
        after: Sequence[ComponentRecord],
    ) -> List[ComponentDiff]:
        after_by_name = _first_by_name(after)
        diffs: List[ComponentDiff] = []
        seen: set[str] = set()

        for record in before:
            if record.name in seen:
                continue
            seen.add(record.name)
            counterpart = after_by_name.get(record.name)
            if counterpart is None:
                status = ComponentStatus.REMOVED
            elif counterpart.type != record.type:
                status = ComponentStatus.MODIFIED
            else:
                status = ComponentStatus.UNCHANGED
            diffs.append(ComponentDiff(name=record.name, type=record.type, status=status))

        for record in after:
            if record.name in seen:
                continue
            seen.add(record.name)
            diffs.append(
                ComponentDiff(name=record.name, type=record.type, status=ComponentStatus.ADDED)
            )
        return diffs


def _first_by_name(records: Sequence[ComponentRecord]) -> Dict[str, ComponentRecord]:
    index: Dict[str, ComponentRecord] = {}
    for record in records:
        index.setdefault(record.name, record)
    return index


__all__ = ["ComponentReconciler"]
