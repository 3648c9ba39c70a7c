"""Line-oriented LCS diff for descriptor text."""

from __future__ import annotations

from array import array
from typing import List, Sequence

from ..config import DEFAULT_MAX_EXACT_LINES
from ..logging import get_logger
from ..models import DiffLine, DiffLineKind


class LineDiffEngine:
    """Diffs two texts line by line using a longest common subsequence.

    Inputs longer than ``max_exact_lines`` on either side skip the quadratic
    table and use an approximate, order-insensitive common-line list instead.
    """

    def __init__(self, max_exact_lines: int = DEFAULT_MAX_EXACT_LINES) -> None:
        self.max_exact_lines = max_exact_lines
        self.logger = get_logger("diff")

    def diff(self, text_a: str, text_b: str) -> List[DiffLine]:
        # Split on line feeds only; a trailing "\r" stays part of the line.
        lines_a = text_a.split("\n")
        lines_b = text_b.split("\n")
        common = self.common_lines(lines_a, lines_b)

        output: List[DiffLine] = []

        def emit(kind: DiffLineKind, content: str) -> None:
            output.append(DiffLine(line_number=len(output) + 1, kind=kind, content=content))

        idx_a = 0
        idx_b = 0
        for line in common:
            while idx_a < len(lines_a) and lines_a[idx_a] != line:
                emit(DiffLineKind.REMOVED, lines_a[idx_a])
                idx_a += 1
            while idx_b < len(lines_b) and lines_b[idx_b] != line:
                emit(DiffLineKind.ADDED, lines_b[idx_b])
                idx_b += 1
            emit(DiffLineKind.CONTEXT, line)
            idx_a += 1
            idx_b += 1

        for remaining in lines_a[idx_a:]:
            emit(DiffLineKind.REMOVED, remaining)
        for remaining in lines_b[idx_b:]:
            emit(DiffLineKind.ADDED, remaining)
        return output

    def uses_fallback(self, count_a: int, count_b: int) -> bool:
        return count_a > self.max_exact_lines or count_b > self.max_exact_lines

    def common_lines(self, lines_a: Sequence[str], lines_b: Sequence[str]) -> List[str]:
        """Return the lines both inputs share, in the order of ``lines_a``."""
        if self.uses_fallback(len(lines_a), len(lines_b)):
            self.logger.debug(
                "Inputs of %d/%d lines exceed %d; using approximate common lines",
                len(lines_a),
                len(lines_b),
                self.max_exact_lines,
            )
            # Membership only: neither position-accurate nor deduplicated.
            members = set(lines_b)
            return [line for line in lines_a if line in members]
        return _longest_common_subsequence(lines_a, lines_b)


def _longest_common_subsequence(a: Sequence[str], b: Sequence[str]) -> List[str]:
    m = len(a)
    n = len(b)
    table = [array("i", [0]) * (n + 1)]
    previous = table[0]
    for i in range(1, m + 1):
        row = array("i", [0]) * (n + 1)
        line = a[i - 1]
        for j in range(1, n + 1):
            if line == b[j - 1]:
                row[j] = previous[j - 1] + 1
            else:
                up = previous[j]
                left = row[j - 1]
                row[j] = up if up > left else left
        table.append(row)
        previous = row

    result: List[str] = []
    i = m
    j = n
    while i > 0 and j > 0:
        if a[i - 1] == b[j - 1]:
            result.append(a[i - 1])
            i -= 1
            j -= 1
        elif table[i - 1][j] > table[i][j - 1]:
            i -= 1
        else:
            # Ties step through b.
            j -= 1
    result.reverse()
    return result


__all__ = ["LineDiffEngine"]
