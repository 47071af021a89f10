"""Runtime services: telemetry, event bus, and debounce timers."""

from .events import EventBus, EventCallback
from .timers import Clock, Debouncer, PendingTimer, TimerQueue

__all__ = [
    "Clock",
    "Debouncer",
    "EventBus",
    "EventCallback",
    "PendingTimer",
    "TimerQueue",
]
