"""View mode state machine and the panel layout each mode implies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mdpad_engine.config import DEFAULT_SPLIT_PERCENT

MIN_SPLIT_PERCENT = 20.0
MAX_SPLIT_PERCENT = 80.0


class ViewMode(str, Enum):
    RAW = "raw"
    SPLIT = "split"
    PREVIEW = "preview"
    EDIT_PAGE = "edit_page"

    @property
    def renders_editable(self) -> bool:
        return self is ViewMode.EDIT_PAGE

    @property
    def shows_raw(self) -> bool:
        return self in (ViewMode.RAW, ViewMode.SPLIT)

    @property
    def shows_pages(self) -> bool:
        return self is not ViewMode.RAW


MODE_ORDER = (ViewMode.RAW, ViewMode.SPLIT, ViewMode.PREVIEW, ViewMode.EDIT_PAGE)


@dataclass(frozen=True, slots=True)
class PanelLayout:
    raw_percent: float
    pages_percent: float


@dataclass(frozen=True, slots=True)
class ModeTransition:
    previous: ViewMode
    current: ViewMode
    layout: PanelLayout

    @property
    def changed(self) -> bool:
        return self.previous is not self.current

    @property
    def entered_edit(self) -> bool:
        return self.changed and self.current is ViewMode.EDIT_PAGE

    @property
    def left_edit(self) -> bool:
        return self.changed and self.previous is ViewMode.EDIT_PAGE


class ModeMachine:
    """Single owner of the current view mode. Transitions are immediate."""

    def __init__(
        self,
        initial: ViewMode = ViewMode.SPLIT,
        *,
        split_percent: float = DEFAULT_SPLIT_PERCENT,
    ) -> None:
        self.current = initial
        self.split_percent = _clamp_split(split_percent)

    def transition(self, target: ViewMode | str) -> ModeTransition:
        mode = ViewMode(target)
        previous = self.current
        self.current = mode
        return ModeTransition(previous=previous, current=mode, layout=self.layout())

    def next_mode(self, mode: Optional[ViewMode] = None) -> ViewMode:
        index = MODE_ORDER.index(mode or self.current)
        return MODE_ORDER[(index + 1) % len(MODE_ORDER)]

    def layout(self) -> PanelLayout:
        mode = self.current
        if not mode.shows_pages:
            return PanelLayout(raw_percent=100.0, pages_percent=0.0)
        if not mode.shows_raw:
            return PanelLayout(raw_percent=0.0, pages_percent=100.0)
        return PanelLayout(
            raw_percent=self.split_percent,
            pages_percent=100.0 - self.split_percent,
        )

    def set_split_percent(self, percent: float) -> PanelLayout:
        self.split_percent = _clamp_split(percent)
        return self.layout()


def _clamp_split(percent: float) -> float:
    return max(MIN_SPLIT_PERCENT, min(MAX_SPLIT_PERCENT, float(percent)))


__all__ = [
    "MAX_SPLIT_PERCENT",
    "MIN_SPLIT_PERCENT",
    "MODE_ORDER",
    "ModeMachine",
    "ModeTransition",
    "PanelLayout",
    "ViewMode",
]
