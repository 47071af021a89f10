"""Change notifications shared by every editing surface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, List, Protocol, TypeVar

T = TypeVar("T")


class ChangeOrigin(str, Enum):
    """Who caused a content change."""

    USER = "user"
    HISTORY = "history"
    SYNC = "sync"


@dataclass(frozen=True)
class ContentChange(Generic[T]):
    """Notification emitted after a surface's content was replaced."""

    content: T
    origin: ChangeOrigin
    label: str = ""


ChangeListener = Callable[[ContentChange[T]], None]


class EditSurface(Protocol[T]):
    """Capability set the sync controller needs from an editing surface."""

    def get_content(self) -> T:
        ...

    def set_content(self, content: T, *, origin: ChangeOrigin) -> None:
        ...

    def on_content_changed(self, callback: ChangeListener[T]) -> Callable[[], None]:
        """Subscribe ``callback``; the returned callable unsubscribes it."""
        ...


class ChangeEmitter(Generic[T]):
    """Minimal listener list surfaces use to publish ``ContentChange`` events."""

    def __init__(self) -> None:
        self._listeners: List[ChangeListener[T]] = []

    def subscribe(self, callback: ChangeListener[T]) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def emit(self, change: ContentChange[T]) -> None:
        for callback in list(self._listeners):
            callback(change)

    def __len__(self) -> int:
        return len(self._listeners)
