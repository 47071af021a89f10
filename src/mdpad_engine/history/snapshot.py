"""Immutable undo/redo snapshots."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Tuple

from mdpad_engine.surfaces.raw import clamp_selection


@dataclass(frozen=True, slots=True)
class Snapshot:
    content: str
    selection_start: int = 0
    selection_end: int = 0
    timestamp: float = field(default_factory=time.time)

    @property
    def selection(self) -> Tuple[int, int]:
        return (self.selection_start, self.selection_end)

    def clamped_selection(self) -> Tuple[int, int]:
        """Selection bounds limited to this snapshot's content length."""

        return clamp_selection(self.selection_start, self.selection_end, len(self.content))
