"""Undo/redo history made of whole-document snapshots."""

from .snapshot import Snapshot
from .store import HistoryTarget, SnapshotStore

__all__ = ["HistoryTarget", "Snapshot", "SnapshotStore"]
