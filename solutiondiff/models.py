"""Core data models shared across solutiondiff components."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


class ComponentStatus(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class DiffLineKind(str, Enum):
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class SolutionInfo:
    """Metadata parsed from the descriptor entry of one package."""

    archive_path: Path
    entry_name: str
    version: str
    unique_name: str
    publisher_unique_name: str
    has_generated_by: bool
    raw_xml: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "archive_path": str(self.archive_path),
            "entry_name": self.entry_name,
            "version": self.version,
            "unique_name": self.unique_name,
            "publisher_unique_name": self.publisher_unique_name,
            "has_generated_by": self.has_generated_by,
        }


@dataclass(frozen=True)
class ComponentRecord:
    """A component declared by the descriptor, identified by name."""

    name: str
    type: str = "unknown"


@dataclass(frozen=True)
class ComponentDiff:
    name: str
    type: str
    status: ComponentStatus


@dataclass(frozen=True)
class DiffLine:
    """One emitted line of the descriptor diff.

    ``line_number`` is the emission sequence number, not a source line number.
    """

    line_number: int
    kind: DiffLineKind
    content: str


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing two solution packages."""

    label_a: str
    label_b: str
    version_a: str
    version_b: str
    publisher_a: str
    publisher_b: str
    unique_name_a: str
    unique_name_b: str
    component_diffs: Tuple[ComponentDiff, ...] = field(default_factory=tuple)
    diff_lines: Tuple[DiffLine, ...] = field(default_factory=tuple)
    summary: str = ""

    def status_counts(self) -> Dict[ComponentStatus, int]:
        counts = Counter(diff.status for diff in self.component_diffs)
        return {status: counts.get(status, 0) for status in ComponentStatus}

    def to_dict(self, *, include_lines: bool = True) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "label_a": self.label_a,
            "label_b": self.label_b,
            "version_a": self.version_a,
            "version_b": self.version_b,
            "publisher_a": self.publisher_a,
            "publisher_b": self.publisher_b,
            "unique_name_a": self.unique_name_a,
            "unique_name_b": self.unique_name_b,
            "component_diffs": [
                {"name": diff.name, "type": diff.type, "status": diff.status.value}
                for diff in self.component_diffs
            ],
            "summary": self.summary,
        }
        if include_lines:
            payload["diff_lines"] = [
                {"line_number": line.line_number, "kind": line.kind.value, "content": line.content}
                for line in self.diff_lines
            ]
        return payload


@dataclass(frozen=True)
class UpdateRequest:
    """Descriptor rewrite requested for a single package."""

    archive_path: Path
    new_version: Optional[str] = None
    remove_generated_by: bool = False
