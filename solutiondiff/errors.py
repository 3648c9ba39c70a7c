"""Error types raised while reading, comparing and rewriting solution packages."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SolutionDiffError(RuntimeError):
    """Base class for failures surfaced to solutiondiff callers."""

    def __init__(self, message: str, *, path: Path | str | None = None, side: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.side = side


def _prefix(side: Optional[str]) -> str:
    return f"Package {side}: " if side else ""


class ArchiveNotFoundError(SolutionDiffError, FileNotFoundError):
    """The archive path does not exist or cannot be opened."""

    def __init__(self, path: Path | str, *, side: Optional[str] = None) -> None:
        name = Path(path).name
        super().__init__(f"{_prefix(side)}archive not found: {name}", path=path, side=side)


class CorruptArchiveError(SolutionDiffError):
    """The file exists but is not a readable zip container."""

    def __init__(self, path: Path | str, *, side: Optional[str] = None, detail: str = "") -> None:
        name = Path(path).name
        message = f"{_prefix(side)}not a valid solution archive: {name}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, path=path, side=side)
        self.detail = detail


class ArchiveReadError(SolutionDiffError):
    """The archive exists but could not be read from disk."""

    def __init__(self, path: Path | str, *, side: Optional[str] = None, detail: str = "") -> None:
        name = Path(path).name
        message = f"{_prefix(side)}unable to read archive: {name}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, path=path, side=side)
        self.detail = detail


class DescriptorMissingError(SolutionDiffError):
    """The archive opened but carries no descriptor entry."""

    def __init__(
        self,
        path: Path | str,
        *,
        side: Optional[str] = None,
        entry_name: str = "solution.xml",
    ) -> None:
        name = Path(path).name
        super().__init__(
            f"{_prefix(side)}Could not read {entry_name} from: {name}",
            path=path,
            side=side,
        )
        self.entry_name = entry_name


class MutationError(SolutionDiffError):
    """Rewriting the descriptor entry failed; the archive is left as it was."""

    def __init__(self, path: Path | str, detail: str) -> None:
        name = Path(path).name
        super().__init__(f"Failed to update {name}: {detail}", path=path)
        self.detail = detail


__all__ = [
    "ArchiveNotFoundError",
    "ArchiveReadError",
    "CorruptArchiveError",
    "DescriptorMissingError",
    "MutationError",
    "SolutionDiffError",
]
