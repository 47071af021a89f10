from __future__ import annotations

from typing import List

from mdpad_engine.runtime import Debouncer, EventBus, TimerQueue


class FakeClock:
    def __init__(self) -> None:
        self.ms = 0

    def __call__(self) -> float:
        return self.ms / 1000.0


def make_queue() -> tuple[TimerQueue, FakeClock]:
    clock = FakeClock()
    return TimerQueue(clock=clock), clock


def test_debouncer_fires_once_after_quiet_period() -> None:
    queue, clock = make_queue()
    fired: List[int] = []
    debouncer = Debouncer(queue, "render", 150, lambda: fired.append(clock.ms))

    for _ in range(5):
        debouncer.trigger()
        clock.ms += 50
        queue.process()

    assert fired == []
    clock.ms += 110
    assert queue.process() == ["render"]
    assert fired == [360]
    assert not debouncer.pending


def test_cancel_drops_pending_callback() -> None:
    queue, clock = make_queue()
    fired: List[str] = []
    debouncer = Debouncer(queue, "checkpoint", 500, lambda: fired.append("x"))

    debouncer.trigger()
    assert debouncer.cancel() is True
    clock.ms = 1000

    assert queue.process() == []
    assert fired == []
    assert debouncer.cancel() is False


def test_flush_runs_callback_immediately() -> None:
    queue, _clock = make_queue()
    fired: List[str] = []
    debouncer = Debouncer(queue, "checkpoint", 500, lambda: fired.append("x"))

    assert debouncer.flush() is False
    debouncer.trigger()

    assert debouncer.flush() is True
    assert fired == ["x"]


def test_independent_names_do_not_interfere() -> None:
    queue, clock = make_queue()
    fired: List[str] = []
    queue.arm("render", 150, lambda: fired.append("render"))
    queue.arm("checkpoint", 500, lambda: fired.append("checkpoint"))

    clock.ms = 200
    queue.process()
    assert fired == ["render"]
    assert queue.pending() == ["checkpoint"]

    clock.ms = 600
    queue.process()
    assert fired == ["render", "checkpoint"]


def test_callback_rearming_itself_is_not_fired_twice_in_one_sweep() -> None:
    queue, clock = make_queue()
    fired: List[int] = []

    def callback() -> None:
        fired.append(clock.ms)
        queue.arm("loop", 100, callback)

    queue.arm("loop", 100, callback)
    clock.ms = 100

    assert queue.process() == ["loop"]
    assert fired == [100]
    assert queue.is_pending("loop")


def test_event_bus_unsubscribe() -> None:
    bus = EventBus()
    received: List[object] = []
    unsubscribe = bus.subscribe("status", received.append)

    bus.emit("status", "Updated")
    unsubscribe()
    bus.emit("status", "Ignored")

    assert received == ["Updated"]
    assert bus.has_subscribers("status") is False
