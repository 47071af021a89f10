"""Page flow engine: measurement capability, page records, paginator."""

from .measure import (
    BlockMetrics,
    FunctionStagingArea,
    MeasureHeight,
    StagingArea,
    StagingFactory,
    function_staging,
    outer_height,
)
from .pages import Node, Page, StructuredContent, flatten_pages
from .paginator import Paginator, paginate

__all__ = [
    "BlockMetrics",
    "FunctionStagingArea",
    "MeasureHeight",
    "Node",
    "Page",
    "Paginator",
    "StagingArea",
    "StagingFactory",
    "StructuredContent",
    "flatten_pages",
    "function_staging",
    "outer_height",
    "paginate",
]
