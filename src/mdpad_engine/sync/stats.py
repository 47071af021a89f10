"""Status bar figures derived from the canonical source."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DocumentStats:
    words: int
    characters: int
    line: int
    column: int

    @property
    def cursor_label(self) -> str:
        return f"Ln {self.line}, Col {self.column}"


def compute_stats(text: str, cursor: int = 0) -> DocumentStats:
    """Word/char counts plus 1-based line and column of ``cursor``."""

    stripped = text.strip()
    words = len(stripped.split()) if stripped else 0
    before = text[: max(0, min(cursor, len(text)))]
    lines = before.split("\n")
    return DocumentStats(
        words=words,
        characters=len(text),
        line=len(lines),
        column=len(lines[-1]) + 1,
    )


__all__ = ["DocumentStats", "compute_stats"]
