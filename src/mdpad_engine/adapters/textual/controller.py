"""Textual adapter that wires SyncController events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from mdpad_engine.surfaces import ContentChange
from mdpad_engine.surfaces.pages import Pages
from mdpad_engine.sync import DocumentStats, PanelLayout, SyncController, ViewMode

HOST_EDIT = "host_edit"


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_pages: Callable[[Pages], None]
    update_raw: Callable[[str, Tuple[int, int]], None] = _noop
    update_status: Callable[[str], None] = _noop
    update_stats: Callable[[DocumentStats], None] = _noop
    update_layout: Callable[[PanelLayout, ViewMode], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualSyncAdapter:
    """Bridges SyncController bus events and key shortcuts to a Textual UI."""

    MODE_KEYS = {
        "ctrl+1": ViewMode.RAW,
        "ctrl+2": ViewMode.SPLIT,
        "ctrl+3": ViewMode.PREVIEW,
        "ctrl+4": ViewMode.EDIT_PAGE,
    }

    def __init__(self, controller: SyncController, hooks: TextualUIHooks) -> None:
        self.controller = controller
        self.hooks = hooks
        self._commands: Dict[str, Callable[[], object]] = {
            "ctrl+z": controller.undo,
            "ctrl+y": controller.redo,
            "tab": controller.indent,
            "shift+tab": controller.outdent,
            "ctrl+b": lambda: controller.wrap_selection("**"),
            "ctrl+e": lambda: controller.wrap_selection("*"),
            "ctrl+t": controller.cycle_mode,
        }
        self._unsubscribers: List[Callable[[], None]] = []
        self._subscribe_events()
        self.refresh()

    # -- host -> engine --------------------------------------------------------

    def push_raw_edit(self, text: str, selection: Tuple[int, int]) -> bool:
        """Forward an edit made in the host's raw text widget."""

        if text == self.controller.source:
            self.controller.raw.set_selection(*selection)
            return True
        accepted = self.controller.write_source(
            text, selection=selection, label=HOST_EDIT
        )
        self._log_state("raw edit ->", chars=len(text), accepted=accepted)
        return accepted

    def handle_key(self, key: str) -> bool:
        """Run the shortcut bound to ``key``; False when nothing is bound."""

        mode = self.MODE_KEYS.get(key)
        if mode is not None:
            self.controller.set_mode(mode)
            self._log_state("mode ->", key=key)
            return True
        command = self._commands.get(key)
        if command is None:
            return False
        outcome = command()
        self._log_state("command ->", key=key, outcome=outcome)
        return True

    def process_timers(self) -> List[str]:
        fired = self.controller.process_timers()
        if fired:
            self._log_state("timers ->", fired=fired)
        return fired

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # -- engine -> host -----------------------------------------------------------

    def refresh(self) -> None:
        controller = self.controller
        self.hooks.update_raw(controller.source, controller.raw.selection)
        self.hooks.update_pages(controller.pages.pages)
        self.hooks.update_stats(controller.stats)
        self.hooks.update_layout(controller.modes.layout(), controller.mode)

    def _subscribe_events(self) -> None:
        bus = self.controller.bus
        self._unsubscribers.extend(
            [
                self.controller.raw.on_content_changed(self._on_raw_changed),
                bus.subscribe("pages.updated", self._on_pages),
                bus.subscribe("stats.updated", self._on_stats),
                bus.subscribe("layout.updated", self._on_layout),
                bus.subscribe("status", self._on_status),
            ]
        )
        for event in ("render.failed", "sync.failed", "mode.changed", "dirty.changed"):
            self._unsubscribers.append(
                bus.subscribe(
                    event, lambda payload, name=event: self._handle_event(name, payload)
                )
            )

    def _on_raw_changed(self, change: ContentChange[str]) -> None:
        # The host widget already shows what it just typed.
        if change.label == HOST_EDIT:
            return
        self.hooks.update_raw(change.content, self.controller.raw.selection)

    def _on_pages(self, payload: object | None) -> None:
        self.hooks.update_pages(self.controller.pages.pages)

    def _on_stats(self, payload: object | None) -> None:
        if isinstance(payload, DocumentStats):
            self.hooks.update_stats(payload)

    def _on_layout(self, payload: object | None) -> None:
        if isinstance(payload, PanelLayout):
            self.hooks.update_layout(payload, self.controller.mode)

    def _on_status(self, payload: object | None) -> None:
        self.hooks.update_status(str(payload))

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)
        if name in ("render.failed", "sync.failed"):
            self.hooks.update_status(str(payload))
        elif name == "dirty.changed":
            self.hooks.update_status("Unsaved" if payload else "Saved")

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        controller = self.controller
        return {
            "mode": controller.mode.value,
            "selection": controller.raw.selection,
            "pages": len(controller.pages.pages),
            "history": f"{controller.history.current_index + 1}/{len(controller.history)}",
            "dirty": controller.dirty,
            "render_pending": controller.render_pending,
        }


def selection_from_location(text: str, row: int, column: int) -> int:
    """Offset into ``text`` for a (row, column) location, clamped to bounds."""

    lines = text.split("\n")
    row = max(0, min(row, len(lines) - 1))
    offset = sum(len(line) + 1 for line in lines[:row])
    return offset + max(0, min(column, len(lines[row])))


def location_from_offset(text: str, offset: Optional[int]) -> Tuple[int, int]:
    before = text[: max(0, min(offset or 0, len(text)))]
    lines = before.split("\n")
    return (len(lines) - 1, len(lines[-1]))


__all__ = [
    "TextualSyncAdapter",
    "TextualUIHooks",
    "location_from_offset",
    "selection_from_location",
]
