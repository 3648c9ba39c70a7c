"""Compare solution packages and rewrite their descriptors."""

from .models import (
    ComparisonResult,
    ComponentDiff,
    ComponentRecord,
    ComponentStatus,
    DiffLine,
    DiffLineKind,
    SolutionInfo,
    UpdateRequest,
)
from .orchestrator import Orchestrator, build_summary
from .report import ReportRenderer, render_report

__version__ = "0.1.0"

__all__ = [
    "ComparisonResult",
    "ComponentDiff",
    "ComponentRecord",
    "ComponentStatus",
    "DiffLine",
    "DiffLineKind",
    "Orchestrator",
    "ReportRenderer",
    "SolutionInfo",
    "UpdateRequest",
    "build_summary",
    "render_report",
]
