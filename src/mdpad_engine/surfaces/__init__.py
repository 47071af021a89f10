"""Editing surfaces the sync controller reads from and writes to."""

from .base import ChangeEmitter, ChangeListener, ChangeOrigin, ContentChange, EditSurface
from .pages import PageSurface
from .raw import AUTO_PAIRS, INDENT, RawTextSurface, Selection, clamp_selection

__all__ = [
    "AUTO_PAIRS",
    "ChangeEmitter",
    "ChangeListener",
    "ChangeOrigin",
    "ContentChange",
    "EditSurface",
    "INDENT",
    "PageSurface",
    "RawTextSurface",
    "Selection",
    "clamp_selection",
]
