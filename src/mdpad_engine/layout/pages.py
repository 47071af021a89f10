"""Page records produced by the paginator."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Optional, Sequence, Tuple

Node = Any
StructuredContent = Sequence[Node]


@dataclass(frozen=True, slots=True)
class Page:
    """One page of flowed content.

    ``number`` is 1-based. ``height`` is the sum of the measured outer heights
    of ``nodes`` and may exceed the capacity when a single block overflows.
    An ``error`` page is the placeholder shown in place of a failed render.
    """

    number: int
    nodes: Tuple[Node, ...] = ()
    editable: bool = False
    height: float = 0.0
    error: Optional[str] = None

    @classmethod
    def placeholder(cls, message: str) -> "Page":
        return cls(number=1, error=message)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def overflows(self, capacity_height: float) -> bool:
        return self.height > capacity_height

    def with_nodes(self, nodes: Iterable[Node]) -> "Page":
        return replace(self, nodes=tuple(nodes))


def flatten_pages(pages: Iterable[Page]) -> List[Node]:
    """Concatenate page nodes in page order, then node order."""

    return [node for page in pages for node in page.nodes]


__all__ = ["Node", "Page", "StructuredContent", "flatten_pages"]
