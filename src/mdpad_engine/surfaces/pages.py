"""Rendered page surface; editable while the engine is in edit-page mode."""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

from mdpad_engine.layout.pages import Node, Page, flatten_pages

from .base import ChangeEmitter, ChangeListener, ChangeOrigin, ContentChange

Pages = Tuple[Page, ...]


class ReadOnlyPageError(RuntimeError):
    """Raised when a node edit reaches pages that were not rendered editable."""

    def __init__(self, page_number: int) -> None:
        super().__init__(f"Page {page_number} is not editable")
        self.page_number = page_number


class PageSurface:
    """Holds the displayed page set.

    The controller replaces pages wholesale on every render (``SYNC`` origin).
    Node edits made by the user on editable pages emit ``USER`` changes carrying
    the whole page set.
    """

    def __init__(self) -> None:
        self._pages: Pages = (Page(number=1),)
        self._changes: ChangeEmitter[Pages] = ChangeEmitter()
        self._focus_listeners: List[Callable[[bool], None]] = []
        self.focused = False

    def get_content(self) -> Pages:
        return self._pages

    def set_content(
        self,
        content: Sequence[Page],
        *,
        origin: ChangeOrigin = ChangeOrigin.SYNC,
        label: str = "set_pages",
    ) -> None:
        self._pages = tuple(content) or (Page(number=1),)
        self._changes.emit(ContentChange(content=self._pages, origin=origin, label=label))

    def on_content_changed(self, callback: ChangeListener[Pages]) -> Callable[[], None]:
        return self._changes.subscribe(callback)

    @property
    def pages(self) -> Pages:
        return self._pages

    @property
    def editable(self) -> bool:
        return any(page.editable for page in self._pages)

    @property
    def error(self) -> str | None:
        return next((page.error for page in self._pages if page.error), None)

    def structured_content(self) -> List[Node]:
        return flatten_pages(self._pages)

    def show_error(self, message: str) -> None:
        self.set_content((Page.placeholder(message),), label="error")

    # -- user edits on editable pages ----------------------------------------

    def replace_node(self, page_number: int, index: int, node: Node) -> None:
        page = self._editable_page(page_number)
        nodes = list(page.nodes)
        nodes[index] = node
        self._commit(page, nodes, "replace_node")

    def insert_node(self, page_number: int, index: int, node: Node) -> None:
        page = self._editable_page(page_number)
        nodes = list(page.nodes)
        nodes.insert(index, node)
        self._commit(page, nodes, "insert_node")

    def remove_node(self, page_number: int, index: int) -> None:
        page = self._editable_page(page_number)
        nodes = list(page.nodes)
        del nodes[index]
        self._commit(page, nodes, "remove_node")

    def replace_page_nodes(self, page_number: int, nodes: Sequence[Node]) -> None:
        """Swap a whole page's nodes, e.g. after the host re-parsed its text."""

        page = self._editable_page(page_number)
        self._commit(page, list(nodes), "replace_page")

    def _editable_page(self, page_number: int) -> Page:
        page = self._pages[page_number - 1]
        if not page.editable:
            raise ReadOnlyPageError(page_number)
        return page

    def _commit(self, page: Page, nodes: List[Node], label: str) -> None:
        pages = list(self._pages)
        pages[page.number - 1] = page.with_nodes(nodes)
        self.set_content(pages, origin=ChangeOrigin.USER, label=label)

    # -- focus -------------------------------------------------------------------

    def focus(self) -> None:
        self._set_focus(True)

    def blur(self) -> None:
        self._set_focus(False)

    def on_focus_changed(self, callback: Callable[[bool], None]) -> Callable[[], None]:
        self._focus_listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._focus_listeners:
                self._focus_listeners.remove(callback)

        return unsubscribe

    def _set_focus(self, focused: bool) -> None:
        if self.focused == focused:
            return
        self.focused = focused
        for callback in list(self._focus_listeners):
            callback(focused)


__all__ = ["PageSurface", "Pages", "ReadOnlyPageError"]
