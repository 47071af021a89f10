"""Named-event bus the controller uses to talk to host adapters."""

from __future__ import annotations

from typing import Callable, Dict, List

EventCallback = Callable[[object], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventCallback]] = {}

    def subscribe(self, event: str, callback: EventCallback) -> Callable[[], None]:
        callbacks = self._subscribers.setdefault(event, [])
        callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)

    def has_subscribers(self, event: str) -> bool:
        return bool(self._subscribers.get(event))


__all__ = ["EventBus", "EventCallback"]
