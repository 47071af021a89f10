"""Plain-text markdown surface with a selection, modelled on a textarea."""

from __future__ import annotations

import re
from typing import Callable, List, Literal, Optional, Tuple

from .base import ChangeEmitter, ChangeListener, ChangeOrigin, ContentChange

Selection = Tuple[int, int]
SelectMode = Literal["end", "start", "select", "preserve"]

INDENT = "  "
AUTO_PAIRS = {
    "(": ")",
    "[": "]",
    "{": "}",
    '"': '"',
    "'": "'",
    "`": "`",
    "*": "*",
    "_": "_",
}
# Only these wrap an existing selection; brackets fall through to normal typing.
WRAPPING_PAIRS = frozenset({"*", "_", "`", '"', "'"})
_OUTDENT = re.compile(r"^(\t|  )")


def clamp_selection(start: int, end: int, length: int) -> Selection:
    start = max(0, min(start, length))
    end = max(0, min(end, length))
    if end < start:
        start, end = end, start
    return start, end


class RawTextSurface:
    """Raw markdown text plus selection offsets.

    Every content mutation emits a ``ContentChange[str]``; selection moves
    emit through a separate listener list so they never look like edits.
    """

    def __init__(self, text: str = "", *, selection: Optional[Selection] = None) -> None:
        self._text = text
        self._selection = clamp_selection(*(selection or (0, 0)), len(text))
        self._changes: ChangeEmitter[str] = ChangeEmitter()
        self._selection_listeners: List[Callable[[Selection], None]] = []
        self.focused = False

    # -- EditSurface ---------------------------------------------------------

    def get_content(self) -> str:
        return self._text

    def set_content(
        self,
        content: str,
        *,
        origin: ChangeOrigin = ChangeOrigin.USER,
        selection: Optional[Selection] = None,
        label: str = "set_content",
    ) -> None:
        self._text = content
        start, end = selection if selection is not None else self._selection
        self._selection = clamp_selection(start, end, len(content))
        self._changes.emit(ContentChange(content=content, origin=origin, label=label))
        self._notify_selection()

    def on_content_changed(self, callback: ChangeListener[str]) -> Callable[[], None]:
        return self._changes.subscribe(callback)

    # -- selection -------------------------------------------------------------

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def selected_text(self) -> str:
        start, end = self._selection
        return self._text[start:end]

    def set_selection(self, start: int, end: Optional[int] = None) -> None:
        self._selection = clamp_selection(
            start, start if end is None else end, len(self._text)
        )
        self._notify_selection()

    def on_selection_changed(
        self, callback: Callable[[Selection], None]
    ) -> Callable[[], None]:
        self._selection_listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._selection_listeners:
                self._selection_listeners.remove(callback)

        return unsubscribe

    def _notify_selection(self) -> None:
        for callback in list(self._selection_listeners):
            callback(self._selection)

    # -- editing primitives ------------------------------------------------------

    def replace_range(
        self,
        start: int,
        end: int,
        text: str,
        *,
        select: SelectMode = "end",
        label: str = "replace_range",
    ) -> None:
        """Replace ``[start:end]`` with ``text`` and place the selection."""

        start, end = clamp_selection(start, end, len(self._text))
        updated = self._text[:start] + text + self._text[end:]
        if select == "end":
            selection = (start + len(text), start + len(text))
        elif select == "start":
            selection = (start, start)
        elif select == "select":
            selection = (start, start + len(text))
        else:
            selection = self._selection
        self.set_content(
            updated, origin=ChangeOrigin.USER, selection=selection, label=label
        )

    def type_text(self, text: str) -> None:
        """Replace the selection with typed text, caret after it."""

        start, end = self._selection
        self.replace_range(start, end, text, label="type")

    def backspace(self) -> None:
        start, end = self._selection
        if start == end:
            if start == 0:
                return
            start -= 1
        self.replace_range(start, end, "", label="backspace")

    # -- structural edits ----------------------------------------------------------

    def line_bounds(self) -> Selection:
        """Start of the first and end of the last line touched by the selection."""

        start, end = self._selection
        line_start = self._text.rfind("\n", 0, start) + 1
        line_end = self._text.find("\n", end)
        return line_start, len(self._text) if line_end == -1 else line_end

    def indent(self) -> None:
        start, end = self._selection
        self.replace_range(start, end, INDENT, label="indent")

    def outdent(self) -> None:
        start, end = self._selection
        line_start = self._text.rfind("\n", 0, start) + 1
        line_text = self._text[line_start:end]
        outdented = _OUTDENT.sub("", line_text, count=1)
        removed = len(line_text) - len(outdented)
        if not removed:
            return
        self.replace_range(line_start, end, outdented, label="outdent")
        self.set_selection(max(line_start, start - removed), end - removed)

    def wrap_selection(
        self, prefix: str, suffix: str, *, placeholder: str = "text"
    ) -> None:
        """Wrap the selection; an empty selection gets a selected placeholder."""

        start, end = self._selection
        selected = self._text[start:end]
        body = selected or placeholder
        self.replace_range(
            start, end, prefix + body + suffix, select="select", label="wrap"
        )
        if not selected:
            inner = start + len(prefix)
            self.set_selection(inner, inner + len(placeholder))

    def auto_pair(self, char: str) -> bool:
        """Wrap a non-empty selection in a matching pair; False when not handled."""

        if char not in WRAPPING_PAIRS:
            return False
        start, end = self._selection
        if start == end:
            return False
        self.replace_range(
            start,
            end,
            char + self._text[start:end] + AUTO_PAIRS[char],
            select="select",
            label="auto_pair",
        )
        return True

    def prefix_lines(self, prefix: str | Callable[[int], str]) -> None:
        """Prefix every selected line; a callable receives the line index."""

        line_start, line_end = self.line_bounds()
        lines = self._text[line_start:line_end].split("\n")
        make = prefix if callable(prefix) else (lambda _index: prefix)
        prefixed = "\n".join(make(index) + line for index, line in enumerate(lines))
        self.replace_range(line_start, line_end, prefixed, label="prefix_lines")


__all__ = [
    "AUTO_PAIRS",
    "INDENT",
    "RawTextSurface",
    "Selection",
    "WRAPPING_PAIRS",
    "clamp_selection",
]
