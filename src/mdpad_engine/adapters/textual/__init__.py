"""Textual host for the paged markdown engine."""

from .controller import TextualSyncAdapter, TextualUIHooks

__all__ = ["TextualSyncAdapter", "TextualUIHooks"]
