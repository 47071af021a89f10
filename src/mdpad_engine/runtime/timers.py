"""Trailing-edge debounce timers polled from the host event loop."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

Clock = Callable[[], float]


@dataclass
class PendingTimer:
    deadline: float
    delay_ms: int
    generation: int
    callback: Callable[[], None]


class TimerQueue:
    """Named debounce timers sharing one monotonic clock.

    Arming a name that is already pending replaces its deadline, so only the
    last-scheduled callback in a quiet window ever runs.
    """

    def __init__(self, *, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or time.monotonic
        self._pending: Dict[str, PendingTimer] = {}
        self._generation = 0

    def arm(self, name: str, delay_ms: int, callback: Callable[[], None]) -> int:
        self._generation += 1
        self._pending[name] = PendingTimer(
            deadline=self._clock() + delay_ms / 1000.0,
            delay_ms=delay_ms,
            generation=self._generation,
            callback=callback,
        )
        return self._generation

    def cancel(self, name: str) -> bool:
        return self._pending.pop(name, None) is not None

    def is_pending(self, name: str) -> bool:
        return name in self._pending

    def pending(self) -> List[str]:
        return list(self._pending)

    def process(self) -> List[str]:
        """Fire every timer whose deadline has passed; return the fired names."""

        now = self._clock()
        expired = [
            (name, timer.generation)
            for name, timer in self._pending.items()
            if timer.deadline <= now
        ]
        return [name for name, generation in expired if self._fire(name, generation)]

    def flush(self, name: Optional[str] = None) -> List[str]:
        """Fire pending timers immediately, regardless of deadline."""

        if name is not None:
            timer = self._pending.get(name)
            if timer is None:
                return []
            return [name] if self._fire(name, timer.generation) else []

        current = [(key, timer.generation) for key, timer in self._pending.items()]
        return [key for key, generation in current if self._fire(key, generation)]

    def _fire(self, name: str, generation: int) -> bool:
        timer = self._pending.get(name)
        # A callback fired earlier in this sweep may have re-armed the timer.
        if timer is None or timer.generation != generation:
            return False
        del self._pending[name]
        timer.callback()
        return True


class Debouncer:
    """One named slot in a ``TimerQueue`` with a fixed quiet period."""

    def __init__(
        self,
        queue: TimerQueue,
        name: str,
        delay_ms: int,
        callback: Callable[[], None],
    ) -> None:
        self.queue = queue
        self.name = name
        self.delay_ms = delay_ms
        self.callback = callback

    def trigger(self) -> None:
        self.queue.arm(self.name, self.delay_ms, self.callback)

    def cancel(self) -> bool:
        return self.queue.cancel(self.name)

    def flush(self) -> bool:
        return bool(self.queue.flush(self.name))

    @property
    def pending(self) -> bool:
        return self.queue.is_pending(self.name)


__all__ = ["Clock", "Debouncer", "PendingTimer", "TimerQueue"]
