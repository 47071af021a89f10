"""Default markdown collaborators built on markdown-it-py.

Top-level markdown-it block tokens become ``MarkdownBlock`` nodes that keep
the source lines they were parsed from, which is what makes
``to_markdown`` possible without a full HTML round trip.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from markdown_it import MarkdownIt

_UNSAFE_HTML = re.compile(
    r"<\s*(script|iframe|object|embed|style)\b|\bon\w+\s*=|javascript:",
    re.IGNORECASE,
)
_NEWLINES = re.compile(r"\r\n?")


@dataclass(frozen=True, slots=True)
class MarkdownBlock:
    """Atomic block-level node: paragraph, heading, list, table, fence..."""

    kind: str
    source: str
    text: str = ""
    tag: str = ""
    line_span: Tuple[int, int] = (0, 0)

    def with_source(self, source: str) -> "MarkdownBlock":
        """Return the block re-parsed from edited markdown ``source``."""

        parsed = MarkdownRenderer.default().render(source)
        if len(parsed) == 1:
            return replace(parsed[0], line_span=self.line_span)
        return replace(self, source=source.strip("\n"), text=source.strip())


class MarkdownRenderer:
    _default: Optional["MarkdownRenderer"] = None

    def __init__(self, md: Optional[MarkdownIt] = None) -> None:
        self.md = md or MarkdownIt("commonmark").enable("table")

    @classmethod
    def default(cls) -> "MarkdownRenderer":
        if cls._default is None:
            cls._default = cls()
        return cls._default

    def render(self, markdown: str) -> List[MarkdownBlock]:
        # Token maps count "\n" only, after markdown-it's own newline normalisation.
        lines = _NEWLINES.sub("\n", markdown).split("\n")
        blocks: List[MarkdownBlock] = []
        parts: List[str] = []
        opener = None

        def close() -> None:
            if opener is None:
                return
            start, end = opener.map
            blocks.append(
                MarkdownBlock(
                    kind=opener.type.removesuffix("_open"),
                    source="\n".join(lines[start:end]).strip("\n"),
                    text="\n".join(part for part in parts if part),
                    tag=opener.tag,
                    line_span=(start, end),
                )
            )

        for token in self.md.parse(markdown):
            if token.level == 0 and token.nesting >= 0 and token.map:
                close()
                opener = token
                parts = [token.content.rstrip("\n")] if token.nesting == 0 else []
            elif token.type == "inline":
                parts.append(token.content)
            elif token.type in ("fence", "code_block"):
                parts.append(token.content.rstrip("\n"))
        close()
        return _with_unclaimed_lines(blocks, lines)

    def sanitize(self, content: Sequence[MarkdownBlock]) -> List[MarkdownBlock]:
        return [
            block
            for block in content
            if not (block.kind == "html_block" and _UNSAFE_HTML.search(block.source))
        ]

    def to_markdown(self, content: Iterable[MarkdownBlock]) -> str:
        sources = [block.source for block in content if block.source.strip()]
        if not sources:
            return ""
        return "\n\n".join(sources) + "\n"


def _with_unclaimed_lines(
    blocks: List[MarkdownBlock], lines: List[str]
) -> List[MarkdownBlock]:
    """Interleave ``reference`` blocks for lines no block token claimed.

    markdown-it consumes link reference definitions without emitting a token,
    so without these blocks ``to_markdown`` would drop the link targets.
    """

    result: List[MarkdownBlock] = []
    cursor = 0
    for block in blocks:
        start, end = block.line_span
        result.extend(_unclaimed(lines, cursor, start))
        result.append(block)
        cursor = max(cursor, end)
    result.extend(_unclaimed(lines, cursor, len(lines)))
    return result


def _unclaimed(lines: List[str], start: int, end: int) -> List[MarkdownBlock]:
    source = "\n".join(lines[start:end]).strip("\n")
    if start >= end or not source.strip():
        return []
    return [
        MarkdownBlock(
            kind="reference", source=source, text=source, line_span=(start, end)
        )
    ]


def render(markdown: str) -> List[MarkdownBlock]:
    return MarkdownRenderer.default().render(markdown)


def sanitize(content: Sequence[MarkdownBlock]) -> List[MarkdownBlock]:
    return MarkdownRenderer.default().sanitize(content)


def to_markdown(content: Iterable[MarkdownBlock]) -> str:
    return MarkdownRenderer.default().to_markdown(content)


__all__ = ["MarkdownBlock", "MarkdownRenderer", "render", "sanitize", "to_markdown"]
