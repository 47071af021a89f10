from __future__ import annotations

from typing import List

import pytest

from mdpad_engine.surfaces import ChangeOrigin, ContentChange, RawTextSurface
from mdpad_engine.surfaces.raw import clamp_selection


def make_surface(text: str, start: int, end: int | None = None) -> RawTextSurface:
    surface = RawTextSurface(text)
    surface.set_selection(start, end)
    return surface


def test_set_content_emits_change_with_origin() -> None:
    surface = RawTextSurface("a")
    changes: List[ContentChange[str]] = []
    surface.on_content_changed(changes.append)

    surface.set_content("b", origin=ChangeOrigin.SYNC, label="page_sync")

    assert changes == [
        ContentChange(content="b", origin=ChangeOrigin.SYNC, label="page_sync")
    ]


def test_unsubscribe_stops_notifications() -> None:
    surface = RawTextSurface()
    changes: List[ContentChange[str]] = []
    unsubscribe = surface.on_content_changed(changes.append)

    unsubscribe()
    surface.set_content("x")

    assert changes == []


def test_selection_moves_do_not_emit_content_changes() -> None:
    surface = RawTextSurface("hello")
    changes: List[ContentChange[str]] = []
    selections: List[tuple[int, int]] = []
    surface.on_content_changed(changes.append)
    surface.on_selection_changed(selections.append)

    surface.set_selection(1, 3)

    assert changes == []
    assert selections == [(1, 3)]
    assert surface.selected_text == "el"


@pytest.mark.parametrize(
    ("start", "end", "length", "expected"),
    [
        (2, 4, 10, (2, 4)),
        (8, 3, 10, (3, 8)),
        (-4, 50, 10, (0, 10)),
        (12, 15, 5, (5, 5)),
    ],
)
def test_clamp_selection(start: int, end: int, length: int, expected: tuple) -> None:
    assert clamp_selection(start, end, length) == expected


def test_type_text_replaces_selection() -> None:
    surface = make_surface("hello world", 6, 11)

    surface.type_text("there")

    assert surface.get_content() == "hello there"
    assert surface.selection == (11, 11)


def test_backspace_deletes_previous_character() -> None:
    surface = make_surface("abc", 2)

    surface.backspace()

    assert surface.get_content() == "ac"
    assert surface.selection == (1, 1)


def test_backspace_at_start_is_noop() -> None:
    surface = make_surface("abc", 0)
    changes: List[ContentChange[str]] = []
    surface.on_content_changed(changes.append)

    surface.backspace()

    assert changes == []


def test_indent_inserts_two_spaces_at_caret() -> None:
    surface = make_surface("item", 0)

    surface.indent()

    assert surface.get_content() == "  item"
    assert surface.selection == (2, 2)


@pytest.mark.parametrize(
    ("text", "caret", "expected", "selection"),
    [
        ("  item", 4, "item", (2, 2)),
        ("\titem", 3, "item", (2, 2)),
        ("top\n    nested", 10, "top\n  nested", (8, 8)),
    ],
)
def test_outdent_strips_one_indent_level(
    text: str, caret: int, expected: str, selection: tuple
) -> None:
    surface = make_surface(text, caret)

    surface.outdent()

    assert surface.get_content() == expected
    assert surface.selection == selection


def test_outdent_without_indent_changes_nothing() -> None:
    surface = make_surface("flat", 2)
    changes: List[ContentChange[str]] = []
    surface.on_content_changed(changes.append)

    surface.outdent()

    assert changes == []
    assert surface.get_content() == "flat"


def test_wrap_selection_selects_wrapped_text() -> None:
    surface = make_surface("make bold now", 5, 9)

    surface.wrap_selection("**", "**")

    assert surface.get_content() == "make **bold** now"
    assert surface.selection == (5, 13)


def test_wrap_empty_selection_selects_placeholder() -> None:
    surface = make_surface("", 0)

    surface.wrap_selection("*", "*")

    assert surface.get_content() == "*text*"
    assert surface.selected_text == "text"


def test_auto_pair_wraps_selected_text() -> None:
    surface = make_surface("say hi", 4, 6)

    assert surface.auto_pair("`") is True
    assert surface.get_content() == "say `hi`"


@pytest.mark.parametrize(("char", "start", "end"), [("(", 0, 3), ("*", 1, 1)])
def test_auto_pair_declines(char: str, start: int, end: int) -> None:
    surface = make_surface("abc", start, end)

    assert surface.auto_pair(char) is False
    assert surface.get_content() == "abc"


def test_prefix_lines_covers_every_selected_line() -> None:
    surface = make_surface("one\ntwo\nthree", 1, 6)

    surface.prefix_lines("> ")

    assert surface.get_content() == "> one\n> two\nthree"


def test_prefix_lines_numbers_with_callable() -> None:
    surface = make_surface("a\nb\nc", 0, 5)

    surface.prefix_lines(lambda index: f"{index + 1}. ")

    assert surface.get_content() == "1. a\n2. b\n3. c"
