"""Default render, sanitize, convert and measure collaborators."""

from .markdown import MarkdownBlock, MarkdownRenderer, render, sanitize, to_markdown
from .terminal import (
    TERMINAL_GEOMETRY,
    TerminalStagingArea,
    block_lines,
    measure_height,
    terminal_staging,
)

__all__ = [
    "MarkdownBlock",
    "MarkdownRenderer",
    "TERMINAL_GEOMETRY",
    "TerminalStagingArea",
    "block_lines",
    "measure_height",
    "render",
    "sanitize",
    "terminal_staging",
    "to_markdown",
]
