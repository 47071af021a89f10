"""Sync controller keeping the canonical source, history, and pages aligned."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from mdpad_engine.config import EngineConfig
from mdpad_engine.errors import ConversionFailure, RenderFailure
from mdpad_engine.history import SnapshotStore
from mdpad_engine.layout import (
    MeasureHeight,
    Paginator,
    StagingFactory,
    StructuredContent,
    function_staging,
)
from mdpad_engine.runtime import Clock, Debouncer, EventBus, TimerQueue, telemetry
from mdpad_engine.surfaces import ChangeOrigin, ContentChange, PageSurface, RawTextSurface
from mdpad_engine.surfaces.pages import Pages
from mdpad_engine.surfaces.raw import WRAPPING_PAIRS

from .modes import ModeMachine, ModeTransition, PanelLayout, ViewMode
from .scroll import Pane, ScrollMetrics, ScrollSync
from .stats import DocumentStats, compute_stats

RenderFn = Callable[[str], StructuredContent]
SanitizeFn = Callable[[StructuredContent], StructuredContent]
ToMarkdownFn = Callable[[Sequence[Any]], str]

RENDER_TIMER = "render"
CHECKPOINT_TIMER = "checkpoint"


def _identity(content: StructuredContent) -> StructuredContent:
    return content


class SyncController:
    """Owns the canonical source and the editing loop around it.

    Raw edits schedule a debounced render. Edits on editable pages are turned
    back into markdown and written to the source with ``SYNC`` provenance; the
    render such a write would normally schedule is suppressed while the page
    surface has focus, so the user's position inside the page survives.

    Bus events: ``pages.updated``, ``render.failed``, ``sync.failed``,
    ``stats.updated``, ``layout.updated``, ``mode.changed``, ``dirty.changed``
    and ``status``.
    """

    def __init__(
        self,
        render: RenderFn,
        to_markdown: ToMarkdownFn,
        *,
        measure_height: Optional[MeasureHeight] = None,
        staging: Optional[StagingFactory] = None,
        sanitize: SanitizeFn = _identity,
        config: Optional[EngineConfig] = None,
        text: str = "",
        mode: ViewMode = ViewMode.SPLIT,
        clock: Optional[Clock] = None,
        bus: Optional[EventBus] = None,
        logger_name: str | None = "mdpad_engine.sync",
    ) -> None:
        if staging is None:
            if measure_height is None:
                raise ValueError("Provide `measure_height` or `staging`.")
            staging = function_staging(measure_height)

        self.config = config or EngineConfig()
        self._render = render
        self._sanitize = sanitize
        self._to_markdown = to_markdown
        self._logger_name = logger_name
        self.bus = bus or EventBus()

        self.raw = RawTextSurface(text)
        self.pages = PageSurface()
        self.paginator = Paginator(staging, geometry=self.config.geometry)
        self.modes = ModeMachine(mode, split_percent=self.config.split_percent)
        self.scroll = ScrollSync()
        self.history = SnapshotStore(self.raw, limit=self.config.history_limit)

        self.timers = TimerQueue(clock=clock)
        self._render_debounce = Debouncer(
            self.timers, RENDER_TIMER, self.config.render_delay_ms, self.render_now
        )
        self._checkpoint_debounce = Debouncer(
            self.timers,
            CHECKPOINT_TIMER,
            self.config.checkpoint_delay_ms,
            self._checkpoint_if_changed,
        )

        self._source = text
        self._page_emitting = False
        self._structural_depth = 0
        self._layout_stale = False
        self.dirty = False
        self.render_count = 0
        self.last_error: Optional[Exception] = None

        self._unsubscribers: List[Callable[[], None]] = [
            self.raw.on_content_changed(self._on_raw_changed),
            self.raw.on_selection_changed(lambda _sel: self._publish_stats()),
            self.pages.on_content_changed(self._on_pages_changed),
            self.pages.on_focus_changed(self._on_pages_focus),
        ]
        self.render_now()

    # -- canonical source ----------------------------------------------------

    @property
    def source(self) -> str:
        return self._source

    @source.setter
    def source(self, text: str) -> None:
        self.write_source(text)

    def write_source(
        self,
        text: str,
        *,
        selection: Optional[Tuple[int, int]] = None,
        label: str = "set_source",
    ) -> bool:
        """Replace the source as a user edit; refused while pages are editable."""

        if not self._raw_writable(label):
            return False
        self.raw.set_content(
            text, origin=ChangeOrigin.USER, selection=selection, label=label
        )
        return True

    @property
    def mode(self) -> ViewMode:
        return self.modes.current

    @property
    def stats(self) -> DocumentStats:
        return compute_stats(self._source, self.raw.selection[0])

    def load_document(self, text: str) -> None:
        """Replace the document, reset history and render immediately."""

        with telemetry.span(
            "sync::load",
            logger_name=self._logger_name,
            component="sync",
            metadata={"chars": len(text)},
        ):
            self.raw.set_content(
                text, origin=ChangeOrigin.USER, selection=(0, 0), label="load"
            )
            self._checkpoint_debounce.cancel()
            self.history.clear()
            self.render_now()
            self.mark_saved()

    def new_document(self) -> None:
        self.load_document("")

    def mark_saved(self) -> None:
        self._set_dirty(False)

    # -- raw -> rendered -------------------------------------------------------

    def _on_raw_changed(self, change: ContentChange[str]) -> None:
        self._source = change.content
        self._set_dirty(True)
        self._publish_stats()

        if change.origin is ChangeOrigin.USER and not self._structural_depth:
            self._checkpoint_debounce.trigger()

        if (
            change.origin is ChangeOrigin.SYNC
            and self._page_emitting
            and self.pages.focused
        ):
            # Repaginating now would throw away the caret inside the page.
            self._layout_stale = True
            return

        self._render_debounce.trigger()

    def render_now(self) -> bool:
        """Run one render pass immediately; False when it failed."""

        self._render_debounce.cancel()
        editable = self.modes.current.renders_editable
        with telemetry.span(
            "sync::render",
            logger_name=self._logger_name,
            component="sync",
            metadata={"chars": len(self._source), "editable": editable},
        ) as handle:
            try:
                content = self._sanitize(self._render(self._source))
            except Exception as exc:
                failure = RenderFailure(f"Error rendering preview: {exc}", cause=exc)
                handle.warn(str(failure))
                self._report_failure("render.failed", failure)
                self.pages.show_error(str(failure))
                self.bus.emit("pages.updated", self.pages.pages)
                return False

            pages = self.paginator.paginate(
                content, self.config.geometry.content_height, editable
            )
            handle.add_metadata("pages", len(pages))

        self.pages.set_content(pages, origin=ChangeOrigin.SYNC, label="render")
        self._layout_stale = False
        self.last_error = None
        self.render_count += 1
        self.bus.emit("pages.updated", self.pages.pages)
        self.bus.emit("status", "Updated")
        return True

    # -- rendered -> raw ---------------------------------------------------------

    def _on_pages_changed(self, change: ContentChange[Pages]) -> None:
        if change.origin is not ChangeOrigin.USER:
            return
        if not self.modes.current.renders_editable:
            telemetry.record_event(
                "sync.page_edit_ignored",
                level="warning",
                data={"mode": self.modes.current.value, "label": change.label},
                logger_name=self._logger_name,
            )
            return
        self.sync_from_pages()

    def sync_from_pages(self) -> bool:
        """Convert every page's content back to markdown and store it."""

        content = self.pages.structured_content()
        with telemetry.span(
            "sync::pages_to_source",
            logger_name=self._logger_name,
            component="sync",
            metadata={"nodes": len(content), "pages": len(self.pages.pages)},
        ) as handle:
            try:
                markdown = self._to_markdown(content)
            except Exception as exc:
                failure = ConversionFailure(f"Could not convert pages: {exc}", cause=exc)
                handle.warn(str(failure))
                self._report_failure("sync.failed", failure)
                return False
            if not isinstance(markdown, str):
                failure = ConversionFailure(
                    f"Converter returned {type(markdown).__name__}, expected str"
                )
                handle.warn(str(failure))
                self._report_failure("sync.failed", failure)
                return False

        if markdown == self._source:
            return True

        with self._page_sync():
            self.raw.set_content(markdown, origin=ChangeOrigin.SYNC, label="page_sync")
        self._checkpoint_debounce.trigger()
        return True

    @contextmanager
    def _page_sync(self) -> Iterator[None]:
        self._page_emitting = True
        try:
            yield
        finally:
            self._page_emitting = False

    def _on_pages_focus(self, focused: bool) -> None:
        if not focused and self._layout_stale and self.modes.current.renders_editable:
            self._render_debounce.trigger()

    # -- modes ---------------------------------------------------------------------

    def set_mode(self, mode: ViewMode | str) -> ModeTransition:
        transition = self.modes.transition(mode)
        if transition.changed:
            telemetry.record_event(
                "mode.switch",
                data={"from": transition.previous.value, "to": transition.current.value},
                logger_name=self._logger_name,
            )
            self.scroll.reset()
            if transition.left_edit:
                self.pages.blur()
            if transition.entered_edit or transition.left_edit:
                self.render_now()
            self.bus.emit("mode.changed", transition.current)
        self.bus.emit("layout.updated", transition.layout)
        return transition

    def cycle_mode(self) -> ModeTransition:
        return self.set_mode(self.modes.next_mode())

    def set_split_percent(self, percent: float) -> PanelLayout:
        layout = self.modes.set_split_percent(percent)
        self.bus.emit("layout.updated", layout)
        return layout

    def sync_scroll(
        self, source: Pane, source_metrics: ScrollMetrics, target_metrics: ScrollMetrics
    ) -> Optional[float]:
        """Offset the other pane should move to; None when it should stay put."""

        if self.modes.current is not ViewMode.SPLIT:
            return None
        return self.scroll.on_scroll(source, source_metrics, target_metrics)

    # -- history -------------------------------------------------------------------

    def undo(self) -> bool:
        self._checkpoint_debounce.flush()
        undone = self.history.undo()
        if undone:
            self.bus.emit("status", "Undo")
        return undone

    def redo(self) -> bool:
        self._checkpoint_debounce.flush()
        redone = self.history.redo()
        if redone:
            self.bus.emit("status", "Redo")
        return redone

    def _checkpoint_if_changed(self) -> None:
        current = self.history.current
        if current is not None and current.content == self._source:
            return
        self.history.checkpoint()

    # -- structural raw edits ------------------------------------------------------

    def type_text(self, text: str) -> bool:
        """Feed typed text into the raw surface, honouring auto-pairs."""

        if not self._raw_writable("type"):
            return False
        if len(text) == 1 and self.raw.selected_text and text in WRAPPING_PAIRS:
            return self._structural("auto_pair", lambda: self.raw.auto_pair(text))
        self.raw.type_text(text)
        return True

    def indent(self) -> bool:
        return self._structural("indent", self.raw.indent)

    def outdent(self) -> bool:
        return self._structural("outdent", self.raw.outdent)

    def wrap_selection(self, prefix: str, suffix: Optional[str] = None) -> bool:
        closing = prefix if suffix is None else suffix
        return self._structural(
            "wrap", lambda: self.raw.wrap_selection(prefix, closing)
        )

    def prefix_lines(self, prefix: str) -> bool:
        return self._structural("prefix_lines", lambda: self.raw.prefix_lines(prefix))

    def insert_heading(self, level: int) -> bool:
        if not 1 <= level <= 6:
            raise ValueError(f"heading level must be 1-6, got {level}")
        return self.prefix_lines("#" * level + " ")

    def insert_numbered_list(self) -> bool:
        return self._structural(
            "numbered_list",
            lambda: self.raw.prefix_lines(lambda index: f"{index + 1}. "),
        )

    def _structural(self, label: str, edit: Callable[[], object]) -> bool:
        if not self._raw_writable(label):
            return False
        self._checkpoint_debounce.cancel()
        self._checkpoint_if_changed()
        self._structural_depth += 1
        try:
            edit()
        finally:
            self._structural_depth -= 1
        self._checkpoint_if_changed()
        return True

    def _raw_writable(self, label: str) -> bool:
        if self.modes.current.renders_editable:
            telemetry.record_event(
                "sync.raw_edit_rejected",
                level="warning",
                data={"label": label},
                logger_name=self._logger_name,
            )
            return False
        return True

    # -- timers & plumbing -----------------------------------------------------------

    def process_timers(self) -> List[str]:
        """Fire expired debounce timers; hosts call this from their event loop."""

        return self.timers.process()

    def flush_timers(self) -> List[str]:
        return self.timers.flush()

    @property
    def render_pending(self) -> bool:
        return self._render_debounce.pending

    @property
    def checkpoint_pending(self) -> bool:
        return self._checkpoint_debounce.pending

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._render_debounce.cancel()
        self._checkpoint_debounce.cancel()

    def _publish_stats(self) -> None:
        self.bus.emit("stats.updated", self.stats)

    def _set_dirty(self, dirty: bool) -> None:
        if self.dirty == dirty:
            return
        self.dirty = dirty
        self.bus.emit("dirty.changed", dirty)

    def _report_failure(self, event: str, failure: Exception) -> None:
        self.last_error = failure
        telemetry.record_event(
            event,
            level="warning",
            data={"error": str(failure)},
            logger_name=self._logger_name,
        )
        self.bus.emit(event, failure)

__all__ = ["RenderFn", "SanitizeFn", "SyncController", "ToMarkdownFn"]
