"""Character-cell layout for markdown blocks shown in a terminal host."""

from __future__ import annotations

import textwrap
from contextlib import contextmanager
from typing import Iterator, List

from mdpad_engine.config import PageGeometry
from mdpad_engine.layout import BlockMetrics

from .markdown import MarkdownBlock

# Terminal pages: rows and columns rather than pixels.
TERMINAL_GEOMETRY = PageGeometry(
    page_height=48, page_width=80, vertical_padding=4, horizontal_padding=4
)
BLOCK_GAP = 1
_PRESERVE_LINES = {"fence", "code_block", "table", "html_block", "reference"}


def block_lines(block: MarkdownBlock, width: int) -> List[str]:
    """Lines ``block`` occupies at ``width`` columns, as the page shows them."""

    width = max(1, int(width))
    if block.kind in _PRESERVE_LINES:
        raw = block.source.splitlines() or [""]
        return [chunk for line in raw for chunk in _hard_wrap(line, width)]
    if block.kind == "hr":
        return ["─" * width]
    lines: List[str] = []
    for paragraph in (block.text or block.source).splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, width) or [""])
    return lines


def _hard_wrap(line: str, width: int) -> List[str]:
    if not line:
        return [""]
    return [line[i : i + width] for i in range(0, len(line), width)]


class TerminalStagingArea:
    """Lays blocks out at a fixed column width without showing them."""

    def __init__(self, width: float) -> None:
        self.width = width
        self.staged: List[List[str]] = []
        self.released = False

    def measure(self, node: MarkdownBlock) -> BlockMetrics:
        if self.released:
            raise RuntimeError("staging area used after release")
        lines = block_lines(node, int(self.width))
        self.staged.append(lines)
        return BlockMetrics(height=len(lines), margin_bottom=BLOCK_GAP)

    def release(self) -> None:
        self.staged.clear()
        self.released = True


@contextmanager
def terminal_staging(width: float) -> Iterator[TerminalStagingArea]:
    area = TerminalStagingArea(width)
    try:
        yield area
    finally:
        area.release()


def measure_height(node: MarkdownBlock, width: float) -> BlockMetrics:
    return BlockMetrics(height=len(block_lines(node, int(width))), margin_bottom=BLOCK_GAP)


__all__ = [
    "BLOCK_GAP",
    "TERMINAL_GEOMETRY",
    "TerminalStagingArea",
    "block_lines",
    "measure_height",
    "terminal_staging",
]
