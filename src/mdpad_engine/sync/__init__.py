"""Sync controller, view modes, and the status figures it publishes."""

from .controller import RenderFn, SanitizeFn, SyncController, ToMarkdownFn
from .modes import ModeMachine, ModeTransition, PanelLayout, ViewMode
from .scroll import Pane, ScrollMetrics, ScrollSync
from .stats import DocumentStats, compute_stats

__all__ = [
    "DocumentStats",
    "ModeMachine",
    "ModeTransition",
    "Pane",
    "PanelLayout",
    "RenderFn",
    "SanitizeFn",
    "ScrollMetrics",
    "ScrollSync",
    "SyncController",
    "ToMarkdownFn",
    "ViewMode",
    "compute_stats",
]
