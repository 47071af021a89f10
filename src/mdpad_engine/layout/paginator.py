"""Greedy page flow over top-level structured content blocks."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from mdpad_engine.config import PageGeometry
from mdpad_engine.errors import MeasurementFailure
from mdpad_engine.runtime import telemetry

from .measure import MeasureHeight, StagingFactory, function_staging, outer_height
from .pages import Node, Page, StructuredContent


class Paginator:
    """Flows blocks into fixed-height pages without ever splitting a block.

    First-fit in document order: a block that does not fit on a non-empty page
    opens the next page. A block taller than the capacity sits alone on its
    page and overflows it.
    """

    def __init__(
        self,
        staging: StagingFactory,
        *,
        geometry: Optional[PageGeometry] = None,
        logger_name: str | None = "mdpad_engine.layout",
    ) -> None:
        self.staging = staging
        self.geometry = geometry or PageGeometry()
        self._logger_name = logger_name

    def paginate(
        self,
        content: StructuredContent,
        capacity_height: Optional[float] = None,
        editable: bool = False,
    ) -> List[Page]:
        capacity = (
            self.geometry.content_height if capacity_height is None else capacity_height
        )
        nodes = tuple(content)
        with telemetry.span(
            "layout::paginate",
            logger_name=self._logger_name,
            component="paginator",
            metadata={"nodes": len(nodes), "capacity": capacity},
        ) as handle:
            try:
                heights = self.measure_all(nodes)
            except MeasurementFailure as exc:
                handle.warn(f"measurement unavailable, single page fallback: {exc}")
                telemetry.record_event(
                    "layout.measure_failed",
                    level="warning",
                    data={"reason": str(exc), "nodes": len(nodes)},
                    logger_name=self._logger_name,
                )
                return [Page(number=1, nodes=nodes, editable=editable)]
            pages = _flow(nodes, heights, capacity, editable)
            handle.add_metadata("pages", len(pages))
        return pages

    def measure_all(self, nodes: Sequence[Node]) -> List[float]:
        """Measure every block inside one staging area acquisition."""

        width = self.geometry.content_width
        try:
            with self.staging(width) as area:
                return [outer_height(area.measure(node)) for node in nodes]
        except MeasurementFailure:
            raise
        except Exception as exc:
            raise MeasurementFailure(str(exc) or type(exc).__name__, cause=exc) from exc


def _flow(
    nodes: Tuple[Node, ...],
    heights: Sequence[float],
    capacity: float,
    editable: bool,
) -> List[Page]:
    pages: List[Page] = []
    current: List[Node] = []
    current_height = 0.0

    def close() -> None:
        pages.append(
            Page(
                number=len(pages) + 1,
                nodes=tuple(current),
                editable=editable,
                height=current_height,
            )
        )

    for node, height in zip(nodes, heights):
        if current_height + height > capacity and current_height > 0:
            close()
            current = []
            current_height = 0.0
        current.append(node)
        current_height += height

    # Always emit the last page, so an empty document still shows one page.
    close()
    return pages


def paginate(
    content: StructuredContent,
    capacity_height: float,
    editable: bool = False,
    *,
    measure_height: MeasureHeight,
    geometry: Optional[PageGeometry] = None,
) -> List[Page]:
    """Functional entry point over a plain ``measure_height(node, width)``."""

    paginator = Paginator(function_staging(measure_height), geometry=geometry)
    return paginator.paginate(content, capacity_height, editable)


__all__ = ["Paginator", "paginate"]
