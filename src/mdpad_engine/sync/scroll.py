"""Proportional scroll syncing between the raw pane and the page pane."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

Pane = Literal["raw", "pages"]


@dataclass(frozen=True, slots=True)
class ScrollMetrics:
    offset: float
    content_height: float
    viewport_height: float

    @property
    def scrollable(self) -> float:
        return max(0.0, self.content_height - self.viewport_height)

    @property
    def fraction(self) -> float:
        if self.scrollable <= 0:
            return 0.0
        return max(0.0, min(1.0, self.offset / self.scrollable))


class ScrollSync:
    """Maps a scroll on one pane to an offset on the other.

    Applying the mapped offset makes the other pane report a scroll of its
    own; that echo is swallowed once so the two panes do not ping-pong.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self._last_source: Optional[Pane] = None

    def on_scroll(
        self, source: Pane, source_metrics: ScrollMetrics, target_metrics: ScrollMetrics
    ) -> Optional[float]:
        if not self.enabled:
            return None
        if self._last_source is not None and self._last_source != source:
            self._last_source = None
            return None
        self._last_source = source
        return source_metrics.fraction * target_metrics.scrollable

    def reset(self) -> None:
        self._last_source = None


__all__ = ["Pane", "ScrollMetrics", "ScrollSync"]
