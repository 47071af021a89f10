"""Measurement capability consumed by the paginator."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, ContextManager, Iterator, Protocol, Union

from .pages import Node


@dataclass(frozen=True, slots=True)
class BlockMetrics:
    height: float
    margin_top: float = 0.0
    margin_bottom: float = 0.0

    @property
    def outer_height(self) -> float:
        return self.height + self.margin_top + self.margin_bottom


Measurement = Union[BlockMetrics, float, int]
MeasureHeight = Callable[[Node, float], Measurement]


class StagingArea(Protocol):
    """Off-screen area at the page content width, used for one pass."""

    width: float

    def measure(self, node: Node) -> Measurement:
        ...


StagingFactory = Callable[[float], ContextManager[StagingArea]]


def outer_height(measurement: Measurement) -> float:
    if isinstance(measurement, BlockMetrics):
        value = measurement.outer_height
    else:
        value = float(measurement)
    if value < 0:
        raise ValueError(f"negative block height {value!r}")
    return value


class FunctionStagingArea:
    """Staging area backed by a pure ``measure_height(node, width)`` function."""

    def __init__(self, measure_height: MeasureHeight, width: float) -> None:
        self.measure_height = measure_height
        self.width = width

    def measure(self, node: Node) -> Measurement:
        return self.measure_height(node, self.width)


def function_staging(measure_height: MeasureHeight) -> StagingFactory:
    @contextmanager
    def factory(width: float) -> Iterator[StagingArea]:
        yield FunctionStagingArea(measure_height, width)

    return factory


__all__ = [
    "BlockMetrics",
    "FunctionStagingArea",
    "MeasureHeight",
    "Measurement",
    "StagingArea",
    "StagingFactory",
    "function_staging",
    "outer_height",
]
