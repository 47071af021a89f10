"""Bounded linear undo/redo over whole-document snapshots."""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol, Tuple

from mdpad_engine.config import DEFAULT_HISTORY_LIMIT
from mdpad_engine.runtime import telemetry
from mdpad_engine.surfaces.base import ChangeOrigin

from .snapshot import Snapshot


class HistoryTarget(Protocol):
    """The live document a store captures from and restores into."""

    @property
    def selection(self) -> Tuple[int, int]:
        ...

    def get_content(self) -> str:
        ...

    def set_content(
        self,
        content: str,
        *,
        origin: ChangeOrigin,
        selection: Optional[Tuple[int, int]] = None,
        label: str = ...,
    ) -> None:
        ...


class SnapshotStore:
    """Ordered snapshots with a cursor, capped at ``limit`` entries.

    ``checkpoint`` drops any redo branch before appending and evicts the oldest
    entry once the cap is exceeded. Restores run with the store locked, so a
    listener reacting to the restored content cannot checkpoint it again.
    """

    def __init__(
        self,
        target: HistoryTarget,
        *,
        limit: int = DEFAULT_HISTORY_LIMIT,
        clock: Optional[Callable[[], float]] = None,
        logger_name: str | None = "mdpad_engine.history",
    ) -> None:
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.target = target
        self.limit = limit
        self._clock = clock
        self._logger_name = logger_name
        self._stack: List[Snapshot] = []
        self._index = -1
        self._locked = False
        self.checkpoint()

    # -- introspection -------------------------------------------------------

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current(self) -> Optional[Snapshot]:
        if self._index < 0:
            return None
        return self._stack[self._index]

    @property
    def entries(self) -> Tuple[Snapshot, ...]:
        return tuple(self._stack)

    @property
    def locked(self) -> bool:
        return self._locked

    def __len__(self) -> int:
        return len(self._stack)

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._stack) - 1

    # -- operations ------------------------------------------------------------

    def checkpoint(self) -> Optional[Snapshot]:
        if self._locked:
            return None

        start, end = self.target.selection
        snapshot = self._make_snapshot(self.target.get_content(), start, end)

        if self._index < len(self._stack) - 1:
            del self._stack[self._index + 1 :]
        self._stack.append(snapshot)
        self._index += 1

        if len(self._stack) > self.limit:
            del self._stack[0]
            self._index -= 1
            telemetry.record_event(
                "history.evicted",
                level="debug",
                data={"limit": self.limit},
                logger_name=self._logger_name,
            )
        return snapshot

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._index -= 1
        self._restore(self._stack[self._index], label="undo")
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        self._index += 1
        self._restore(self._stack[self._index], label="redo")
        return True

    def clear(self) -> None:
        self._stack.clear()
        self._index = -1
        self.checkpoint()

    def _restore(self, snapshot: Snapshot, *, label: str) -> None:
        with telemetry.span(
            f"history::{label}",
            logger_name=self._logger_name,
            component="history",
            metadata={"index": self._index, "entries": len(self._stack)},
        ):
            self._locked = True
            try:
                self.target.set_content(
                    snapshot.content,
                    origin=ChangeOrigin.HISTORY,
                    selection=snapshot.clamped_selection(),
                    label=label,
                )
            finally:
                self._locked = False

    def _make_snapshot(self, content: str, start: int, end: int) -> Snapshot:
        if self._clock is None:
            return Snapshot(content=content, selection_start=start, selection_end=end)
        return Snapshot(
            content=content,
            selection_start=start,
            selection_end=end,
            timestamp=self._clock(),
        )


__all__ = ["HistoryTarget", "SnapshotStore"]
