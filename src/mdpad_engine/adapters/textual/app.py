"""Executable Textual app that hosts the paged markdown engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when the demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal, VerticalScroll
    from textual.widget import Widget
    from textual.widgets import Footer, Header, Static, TextArea
    from textual.widgets.text_area import Selection as AreaSelection
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use mdpad_engine.adapters.textual.app"
    ) from exc

from mdpad_engine.config import EngineConfig
from mdpad_engine.rendering import (
    TERMINAL_GEOMETRY,
    block_lines,
    render,
    sanitize,
    terminal_staging,
    to_markdown,
)
from mdpad_engine.runtime import telemetry
from mdpad_engine.surfaces.pages import Pages
from mdpad_engine.sync import (
    DocumentStats,
    Pane,
    PanelLayout,
    ScrollMetrics,
    SyncController,
    ViewMode,
)

from .controller import (
    TextualSyncAdapter,
    TextualUIHooks,
    location_from_offset,
    selection_from_location,
)

PAGE_PREFIX = "page-"


def create_default_controller(
    text: str = "", *, mode: ViewMode = ViewMode.SPLIT
) -> SyncController:
    """Build a SyncController on the markdown-it + terminal collaborators."""

    return SyncController(
        render,
        to_markdown,
        staging=terminal_staging,
        sanitize=sanitize,
        config=EngineConfig.from_env(geometry=TERMINAL_GEOMETRY),
        text=text,
        mode=mode,
    )


@dataclass
class UIState:
    status_text: str = ""
    stats_text: str = ""
    mode: ViewMode = ViewMode.SPLIT


class MDPadApp(App[None]):
    """Split raw/page editor embedding the sync controller."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor-area {
		height: 1fr;
	}

	#raw-view {
		height: 1fr;
		border: round $accent;
	}

	#pages-view {
		height: 1fr;
		background: $surface-darken-1;
		padding: 0 1;
	}

	.page {
		width: 80;
		margin: 1 0;
		padding: 1 2;
		background: $surface;
		border: tall $panel;
	}

	.page--error {
		color: $error;
	}

	#status-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+1", "engine('ctrl+1')", "Raw", priority=True),
        Binding("ctrl+2", "engine('ctrl+2')", "Split", priority=True),
        Binding("ctrl+3", "engine('ctrl+3')", "Preview", priority=True),
        Binding("ctrl+4", "engine('ctrl+4')", "Edit pages", priority=True),
        Binding("ctrl+z", "engine('ctrl+z')", "Undo", priority=True),
        Binding("ctrl+y", "engine('ctrl+y')", "Redo", priority=True),
        Binding("ctrl+b", "engine('ctrl+b')", "Bold", priority=True),
        Binding("ctrl+e", "engine('ctrl+e')", "Italic", priority=True),
        Binding("ctrl+t", "engine('ctrl+t')", "Cycle view", priority=True),
        Binding("ctrl+s", "save", "Save"),
    ]

    def __init__(self, *, path: Optional[Path] = None) -> None:
        super().__init__()
        self._state = UIState()
        self._path = path
        self.controller: SyncController | None = None
        self.adapter: TextualSyncAdapter | None = None
        self._raw_widget: TextArea | None = None
        self._pages_widget: VerticalScroll | None = None
        self._status_widget: Static | None = None
        self._scroll_seen = {"raw": 0.0, "pages": 0.0}

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="editor-area"):
            self._raw_widget = TextArea("", id="raw-view")
            yield self._raw_widget
            self._pages_widget = VerticalScroll(id="pages-view")
            yield self._pages_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        text = self._path.read_text(encoding="utf-8") if self._path else ""
        self.controller = create_default_controller(text)
        hooks = TextualUIHooks(
            update_pages=self._update_pages,
            update_raw=self._update_raw,
            update_status=self._update_status,
            update_stats=self._update_stats,
            update_layout=self._update_layout,
            log=self._log_line,
        )
        self.adapter = TextualSyncAdapter(self.controller, hooks)
        self.controller.mark_saved()
        self.set_interval(0.05, self._process_timers)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()
        if self.controller:
            self.controller.close()

    def _process_timers(self) -> None:
        if self.adapter:
            self.adapter.process_timers()
        self._sync_scroll()

    def _sync_scroll(self) -> None:
        if not (self.controller and self._raw_widget and self._pages_widget):
            return
        panes: Dict[Pane, Widget] = {"raw": self._raw_widget, "pages": self._pages_widget}
        for source, widget in panes.items():
            offset = float(widget.scroll_y)
            if offset == self._scroll_seen[source]:
                continue
            self._scroll_seen[source] = offset
            target = panes["pages" if source == "raw" else "raw"]
            mapped = self.controller.sync_scroll(
                source, _scroll_metrics(widget), _scroll_metrics(target)
            )
            if mapped is not None:
                target.scroll_to(y=mapped, animate=False)
            return

    # -- actions -------------------------------------------------------------

    def action_engine(self, key: str) -> None:
        if self.adapter:
            self.adapter.handle_key(key)

    def action_save(self) -> None:
        if not (self.controller and self._path):
            self._update_status("No file to save to")
            return
        self._path.write_text(self.controller.source, encoding="utf-8")
        self.controller.mark_saved()

    # -- widget events -----------------------------------------------------------

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if not (self.adapter and self.controller):
            return
        area = event.text_area
        if area is self._raw_widget:
            if not self.adapter.push_raw_edit(area.text, self._area_offsets(area)):
                self._update_raw(self.controller.source, self.controller.raw.selection)
            return
        page_number = _page_number(area)
        if page_number is None:
            return
        pages = self.controller.pages
        nodes = sanitize(render(area.text))
        current = pages.pages[page_number - 1].nodes
        if to_markdown(nodes) == to_markdown(current):
            return
        pages.replace_page_nodes(page_number, nodes)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if self.controller and event.text_area is self._raw_widget:
            self.controller.raw.set_selection(*self._area_offsets(event.text_area))

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        if self.controller and _page_number(event.widget) is not None:
            self.controller.pages.focus()

    def on_descendant_blur(self, event: events.DescendantBlur) -> None:
        if self.controller and _page_number(event.widget) is not None:
            self.controller.pages.blur()

    # -- hooks ---------------------------------------------------------------------

    def _update_raw(self, text: str, selection: Tuple[int, int]) -> None:
        area = self._raw_widget
        if area is None or area.text == text:
            return
        area.load_text(text)
        area.selection = AreaSelection(
            location_from_offset(text, selection[0]),
            location_from_offset(text, selection[1]),
        )

    def _update_pages(self, pages: Pages) -> None:
        container = self._pages_widget
        if container is None:
            return
        container.remove_children()
        container.mount(*[self._page_widget(page) for page in pages])

    def _page_widget(self, page: Any) -> Widget:
        if page.error:
            return Static(page.error, classes="page page--error")
        if page.editable:
            area = TextArea(
                to_markdown(page.nodes),
                name=f"{PAGE_PREFIX}{page.number}",
                classes="page",
            )
            area.border_title = f"Page {page.number}"
            return area
        width = int(TERMINAL_GEOMETRY.content_width)
        lines: List[str] = []
        for node in page.nodes:
            lines.extend(block_lines(node, width))
            lines.append("")
        widget = Static("\n".join(lines).rstrip("\n"), classes="page")
        widget.border_title = f"Page {page.number}"
        return widget

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        self._refresh_status()

    def _update_stats(self, stats: DocumentStats) -> None:
        self._state.stats_text = (
            f"{stats.words} words | {stats.characters} chars | {stats.cursor_label}"
        )
        self._refresh_status()

    def _update_layout(self, layout: PanelLayout, mode: ViewMode) -> None:
        self._state.mode = mode
        if self._raw_widget is not None:
            self._raw_widget.display = layout.raw_percent > 0
            self._raw_widget.styles.width = f"{layout.raw_percent:g}%"
        if self._pages_widget is not None:
            self._pages_widget.display = layout.pages_percent > 0
            self._pages_widget.styles.width = f"{layout.pages_percent:g}%"
        self._refresh_status()

    def _refresh_status(self) -> None:
        if self._status_widget:
            parts = [self._state.mode.value, self._state.stats_text, self._state.status_text]
            self._status_widget.update(" | ".join(part for part in parts if part))

    def _log_line(self, line: str) -> None:
        telemetry.record_event("ui.trace", level="debug", data={"line": line})

    @staticmethod
    def _area_offsets(area: TextArea) -> Tuple[int, int]:
        text = area.text
        start = selection_from_location(text, *area.selection.start)
        end = selection_from_location(text, *area.selection.end)
        return (min(start, end), max(start, end))


def _scroll_metrics(widget: Widget) -> ScrollMetrics:
    return ScrollMetrics(
        offset=float(widget.scroll_y),
        content_height=float(widget.virtual_size.height),
        viewport_height=float(widget.size.height),
    )


def _page_number(widget: Widget) -> Optional[int]:
    name = widget.name or ""
    if not name.startswith(PAGE_PREFIX):
        return None
    return int(name[len(PAGE_PREFIX) :])


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the paged markdown editor.")
    parser.add_argument("path", nargs="?", type=Path, help="Markdown file to open")
    parser.add_argument(
        "--log-preset",
        default=os.environ.get("MDPAD_ENGINE_LOG_PRESET", "quiet"),
        choices=sorted(telemetry.PRESETS),
        help="Telemetry preset (default: quiet, keeps the terminal clean)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    app = MDPadApp(path=args.path)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
