from __future__ import annotations

from typing import List

import pytest

from mdpad_engine.history import Snapshot, SnapshotStore
from mdpad_engine.surfaces import ChangeOrigin, ContentChange, RawTextSurface


def make_store(text: str = "", *, limit: int = 100) -> tuple[RawTextSurface, SnapshotStore]:
    surface = RawTextSurface(text)
    return surface, SnapshotStore(surface, limit=limit)


def push(surface: RawTextSurface, store: SnapshotStore, text: str) -> None:
    surface.set_content(text, selection=(len(text), len(text)))
    store.checkpoint()


def test_store_starts_with_initial_snapshot() -> None:
    _surface, store = make_store("hello")

    assert len(store) == 1
    assert store.current_index == 0
    assert store.current is not None
    assert store.current.content == "hello"
    assert store.undo() is False
    assert store.redo() is False


def test_checkpoint_records_selection_and_timestamp() -> None:
    surface = RawTextSurface("abc", selection=(1, 2))
    store = SnapshotStore(surface, clock=lambda: 42.0)

    snapshot = store.current

    assert snapshot == Snapshot(
        content="abc", selection_start=1, selection_end=2, timestamp=42.0
    )


def test_capacity_evicts_oldest_and_round_trips() -> None:
    surface, store = make_store("s0", limit=3)
    for text in ("s1", "s2", "s3", "s4"):
        push(surface, store, text)

    assert [entry.content for entry in store.entries] == ["s2", "s3", "s4"]
    assert store.current_index == 2

    assert store.undo() is True
    assert store.undo() is True
    assert surface.get_content() == "s2"
    assert store.undo() is False

    assert store.redo() is True
    assert store.redo() is True
    assert surface.get_content() == "s4"
    assert store.redo() is False


def test_history_bounds_after_limit_plus_k_checkpoints() -> None:
    limit, extra = 5, 3
    surface, store = make_store("seed", limit=limit)
    for index in range(limit + extra):
        push(surface, store, f"v{index}")

    assert len(store) == limit
    undone: List[str] = []
    while store.undo():
        undone.append(surface.get_content())

    assert "seed" not in undone
    assert surface.get_content() == f"v{extra}"


def test_checkpoint_after_undo_discards_redo_branch() -> None:
    surface, store = make_store("s0")
    push(surface, store, "s1")
    push(surface, store, "s2")

    assert store.undo() is True
    push(surface, store, "fresh")

    assert store.redo() is False
    assert [entry.content for entry in store.entries] == ["s0", "s1", "fresh"]


def test_restore_is_tagged_and_cannot_checkpoint_itself() -> None:
    surface, store = make_store("one")
    push(surface, store, "two")
    changes: List[ContentChange[str]] = []

    def listener(change: ContentChange[str]) -> None:
        changes.append(change)
        # A naive listener that checkpoints on every change must be suppressed.
        assert store.checkpoint() is None

    surface.on_content_changed(listener)
    store.undo()
    store.redo()

    assert [change.origin for change in changes] == [
        ChangeOrigin.HISTORY,
        ChangeOrigin.HISTORY,
    ]
    assert [change.label for change in changes] == ["undo", "redo"]
    assert len(store) == 2
    assert store.locked is False


def test_snapshot_selection_clamped_to_content_length() -> None:
    snapshot = Snapshot(content="tiny", selection_start=10, selection_end=30)

    assert snapshot.selection == (10, 30)
    assert snapshot.clamped_selection() == (4, 4)


def test_clear_leaves_single_current_state() -> None:
    surface, store = make_store("a")
    push(surface, store, "b")
    push(surface, store, "c")

    store.clear()

    assert len(store) == 1
    assert store.current_index == 0
    assert store.current is not None and store.current.content == "c"
    assert store.can_undo() is False


def test_invalid_limit_rejected() -> None:
    with pytest.raises(ValueError):
        make_store(limit=0)
