"""Pipeline orchestration for compare/info/update flows."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Sequence

from .archive import ArchiveEntryAccessor
from .config import SolutionDiffConfig
from .diffing import ComponentReconciler, LineDiffEngine
from .errors import (
    ArchiveNotFoundError,
    ArchiveReadError,
    CorruptArchiveError,
    DescriptorMissingError,
)
from .logging import get_logger
from .models import (
    ComparisonResult,
    ComponentDiff,
    ComponentStatus,
    SolutionInfo,
    UpdateRequest,
)
from .parsing import DescriptorParser, decode_descriptor, encode_descriptor, rewrite_descriptor
from .report import ReportRenderer


class Orchestrator:
    """Coordinates reading, comparing and rewriting solution packages.

    Collaborators are stateless; each orchestrator builds its own unless they
    are injected.
    """

    def __init__(
        self,
        config: SolutionDiffConfig | None = None,
        *,
        accessor: ArchiveEntryAccessor | None = None,
        parser: DescriptorParser | None = None,
        reconciler: ComponentReconciler | None = None,
        line_diff: LineDiffEngine | None = None,
        renderer: ReportRenderer | None = None,
    ) -> None:
        self.config = config or SolutionDiffConfig(root=Path.cwd())
        self.entry_name = self.config.descriptor.entry_name
        self.accessor = accessor or ArchiveEntryAccessor(self.config.archive.scratch_dir)
        self.parser = parser or DescriptorParser(self.config.descriptor.component_element)
        self.reconciler = reconciler or ComponentReconciler()
        self.line_diff = line_diff or LineDiffEngine(self.config.diff.max_exact_lines)
        self.renderer = renderer or ReportRenderer(
            self.config.report.title, self.config.report.template
        )
        self.logger = get_logger("orchestrator")

    def read_solution(self, archive_path: Path | str) -> Optional[SolutionInfo]:
        """Parse the descriptor of one package, or ``None`` when it has none."""
        archive = Path(archive_path)
        data = self.accessor.extract_entry(archive, self.entry_name)
        if data is None:
            return None
        return self.parser.parse(
            decode_descriptor(data), archive_path=archive, entry_name=self.entry_name
        )

    def compare(self, path_a: Path | str, path_b: Path | str) -> ComparisonResult:
        """Compare package A ("before") with package B ("after")."""
        archive_a = Path(path_a)
        archive_b = Path(path_b)
        self.logger.info("Comparing %s with %s", archive_a.name, archive_b.name)

        # The two reads are independent; A's failure is reported first.
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="solutiondiff-read") as pool:
            future_a = pool.submit(self._read_side, archive_a, "A")
            future_b = pool.submit(self._read_side, archive_b, "B")
            info_a = future_a.result()
            info_b = future_b.result()

        components_a = self.parser.extract_components(info_a.raw_xml)
        components_b = self.parser.extract_components(info_b.raw_xml)
        if not components_a and not components_b:
            self.logger.warning("Neither descriptor declares any components")

        component_diffs = self.reconciler.reconcile(components_a, components_b)
        diff_lines = self.line_diff.diff(info_a.raw_xml, info_b.raw_xml)
        self.logger.debug(
            "Reconciled %d components; descriptor diff has %d lines",
            len(component_diffs),
            len(diff_lines),
        )

        return ComparisonResult(
            label_a=archive_a.name,
            label_b=archive_b.name,
            version_a=info_a.version,
            version_b=info_b.version,
            publisher_a=info_a.publisher_unique_name,
            publisher_b=info_b.publisher_unique_name,
            unique_name_a=info_a.unique_name,
            unique_name_b=info_b.unique_name,
            component_diffs=tuple(component_diffs),
            diff_lines=tuple(diff_lines),
            summary=build_summary(info_a, info_b, component_diffs),
        )

    def render_report(self, result: ComparisonResult) -> str:
        return self.renderer.render(result)

    def update_solution(self, request: UpdateRequest) -> SolutionInfo:
        """Rewrite the descriptor inside ``request.archive_path``.

        Returns the metadata of the descriptor as written.
        """
        archive = Path(request.archive_path)
        info = self.read_solution(archive)
        if info is None:
            raise DescriptorMissingError(archive, entry_name=self.entry_name)

        updated = rewrite_descriptor(
            info.raw_xml,
            new_version=request.new_version,
            remove_generated_by=request.remove_generated_by,
        )
        if updated == info.raw_xml:
            self.logger.info("Descriptor in %s already up to date; nothing to write", archive.name)
            return info

        self.accessor.replace_entry(archive, self.entry_name, encode_descriptor(updated))
        self.logger.info("Updated %s in %s", self.entry_name, archive.name)
        return self.parser.parse(updated, archive_path=archive, entry_name=self.entry_name)

    # ------------------------------------------------------------------
    # Internals

    def _read_side(self, archive: Path, side: str) -> SolutionInfo:
        try:
            info = self.read_solution(archive)
        except ArchiveNotFoundError as exc:
            raise ArchiveNotFoundError(archive, side=side) from exc
        except CorruptArchiveError as exc:
            raise CorruptArchiveError(archive, side=side, detail=exc.detail) from exc
        except ArchiveReadError as exc:
            raise ArchiveReadError(archive, side=side, detail=exc.detail) from exc
        if info is None:
            raise DescriptorMissingError(archive, side=side, entry_name=self.entry_name)
        return info


def build_summary(
    info_a: SolutionInfo,
    info_b: SolutionInfo,
    component_diffs: Sequence[ComponentDiff],
) -> str:
    """Describe version/publisher changes and component counts, one per line."""
    parts = []
    if info_a.version != info_b.version:
        parts.append(f"Version changed: {info_a.version} → {info_b.version}")
    if info_a.publisher_unique_name != info_b.publisher_unique_name:
        parts.append(
            f"Publisher changed: {info_a.publisher_unique_name} → {info_b.publisher_unique_name}"
        )
    counts = {status: 0 for status in ComponentStatus}
    for diff in component_diffs:
        counts[diff.status] += 1
    parts.append(
        "Components: "
        f"{counts[ComponentStatus.ADDED]} added, "
        f"{counts[ComponentStatus.REMOVED]} removed, "
        f"{counts[ComponentStatus.MODIFIED]} modified, "
        f"{counts[ComponentStatus.UNCHANGED]} unchanged"
    )
    return "\n".join(parts)


__all__ = ["Orchestrator", "build_summary"]
