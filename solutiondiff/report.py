"""Markdown rendering of comparison results."""

from __future__ import annotations

from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader

from .config import DEFAULT_REPORT_TITLE
from .models import ComparisonResult


class ReportRenderer:
    """Renders a ``ComparisonResult`` as Markdown.

    The built-in layout is: title, file labels, metadata table, component
    table (only when components differ) and the summary. A Jinja2 template
    can replace it; it receives ``result``, ``title`` and ``counts``.
    """

    def __init__(self, title: str = DEFAULT_REPORT_TITLE, template_path: Path | None = None) -> None:
        self.title = title
        self.template_path = template_path
        self._env = self._create_env(template_path)

    def render(self, result: ComparisonResult) -> str:
        if self._env is not None and self.template_path is not None:
            template = self._env.get_template(self.template_path.name)
            counts = {status.value: count for status, count in result.status_counts().items()}
            return template.render(result=result, title=self.title, counts=counts)
        return self._render_default(result)

    def _render_default(self, result: ComparisonResult) -> str:
        lines: List[str] = [
            f"# {self.title}",
            "",
            f"**File A:** {result.label_a}",
            f"**File B:** {result.label_b}",
            "",
            "## Metadata",
            "",
            "| Property | File A | File B |",
            "|----------|--------|--------|",
            f"| Unique Name | {result.unique_name_a} | {result.unique_name_b} |",
            f"| Version | {result.version_a} | {result.version_b} |",
            f"| Publisher | {result.publisher_a} | {result.publisher_b} |",
            "",
        ]

        if result.component_diffs:
            lines.extend(
                [
                    "## Component Differences",
                    "",
                    "| Component | Type | Status |",
                    "|-----------|------|--------|",
                ]
            )
            for diff in result.component_diffs:
                lines.append(f"| {diff.name} | {diff.type} | {diff.status.value} |")
            lines.append("")

        lines.extend(["## Summary", "", result.summary])
        return "\n".join(lines)

    @staticmethod
    def _create_env(template_path: Path | None) -> Environment | None:
        if template_path is None:
            return None
        return Environment(
            loader=FileSystemLoader(str(template_path.parent)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )


def render_report(result: ComparisonResult) -> str:
    """Render ``result`` with the built-in layout."""
    return ReportRenderer().render(result)


__all__ = ["ReportRenderer", "render_report"]
