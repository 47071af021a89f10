from __future__ import annotations

import pytest

from mdpad_engine.config import EngineConfig
from mdpad_engine.rendering import (
    TERMINAL_GEOMETRY,
    MarkdownBlock,
    block_lines,
    render,
    sanitize,
    terminal_staging,
    to_markdown,
)
from mdpad_engine.sync import SyncController, ViewMode

DOCUMENT = "# Title\n\nSome *text* here.\n\n```py\nx = 1\n```\n"


def test_render_splits_top_level_blocks() -> None:
    blocks = render(DOCUMENT)

    assert [block.kind for block in blocks] == ["heading", "paragraph", "fence"]
    heading, paragraph, fence = blocks
    assert (heading.tag, heading.text, heading.source) == ("h1", "Title", "# Title")
    assert paragraph.text == "Some *text* here."
    assert fence.text == "x = 1"
    assert fence.line_span == (4, 7)


def test_to_markdown_restores_block_sources() -> None:
    assert to_markdown(render(DOCUMENT)) == DOCUMENT
    assert to_markdown([]) == ""


def test_list_is_a_single_block() -> None:
    blocks = render("- one\n- two\n")

    assert len(blocks) == 1
    assert blocks[0].kind == "bullet_list"
    assert blocks[0].text == "one\ntwo"


def test_sanitize_drops_unsafe_html_only() -> None:
    blocks = render("<script>alert(1)</script>\n\n<div>fine</div>\n\nplain\n")

    kept = sanitize(blocks)

    assert [block.source for block in kept] == ["<div>fine</div>", "plain"]


def test_block_with_source_reparses() -> None:
    block = render("old words")[0]

    edited = block.with_source("## New heading")

    assert edited.kind == "heading"
    assert edited.tag == "h2"


@pytest.mark.parametrize(
    ("block", "width", "expected"),
    [
        (MarkdownBlock("paragraph", "a b c d", text="aaa bbb ccc"), 7, ["aaa bbb", "ccc"]),
        (MarkdownBlock("fence", "abcdefgh"), 3, ["abc", "def", "gh"]),
        (MarkdownBlock("hr", "---"), 4, ["────"]),
    ],
)
def test_block_lines(block: MarkdownBlock, width: int, expected: list) -> None:
    assert block_lines(block, width) == expected


def test_terminal_staging_is_released_after_use() -> None:
    with terminal_staging(20) as area:
        metrics = area.measure(MarkdownBlock("paragraph", "hi", text="hi"))
        assert metrics.outer_height == 2

    assert area.released
    assert area.staged == []
    with pytest.raises(RuntimeError):
        area.measure(MarkdownBlock("paragraph", "hi", text="hi"))


def test_controller_with_markdown_collaborators_paginates() -> None:
    text = "\n\n".join(f"Paragraph {index}." for index in range(30)) + "\n"

    controller = SyncController(
        render,
        to_markdown,
        staging=terminal_staging,
        sanitize=sanitize,
        config=EngineConfig(geometry=TERMINAL_GEOMETRY),
        text=text,
        mode=ViewMode.EDIT_PAGE,
    )

    assert [len(page.nodes) for page in controller.pages.pages] == [22, 8]
    assert to_markdown(controller.pages.structured_content()) == text
    assert controller.sync_from_pages() is True
    assert controller.source == text


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("alpha\u2028beta\n\ngamma\n", "alpha\u2028beta\n\ngamma\n"),
        ("one\x0ctwo\n\nthree\x85four\n\nfive\n", "one\x0ctwo\n\nthree\x85four\n\nfive\n"),
        ("one\r\n\r\ntwo\r\n", "one\n\ntwo\n"),
    ],
)
def test_to_markdown_keeps_text_around_unusual_line_breaks(
    source: str, expected: str
) -> None:
    assert to_markdown(render(source)) == expected


@pytest.mark.parametrize(
    "source",
    [
        "See [docs][d].\n\n[d]: https://example.com\n",
        "[d]: https://example.com\n\nSee [docs][d].\n",
        "Intro.\n\n[a]: https://a.example\n[b]: https://b.example\n\n# End\n",
    ],
)
def test_reference_definitions_survive_round_trip(source: str) -> None:
    blocks = render(source)

    assert to_markdown(blocks) == source
    assert "reference" in [block.kind for block in blocks]


def test_page_edit_keeps_reference_definition_in_source() -> None:
    text = "See [docs][d].\n\n[d]: https://example.com\n"
    controller = SyncController(
        render,
        to_markdown,
        staging=terminal_staging,
        sanitize=sanitize,
        config=EngineConfig(geometry=TERMINAL_GEOMETRY),
        text=text,
        mode=ViewMode.EDIT_PAGE,
    )

    controller.pages.replace_node(1, 0, render("See [the docs][d].")[0])

    assert controller.source == "See [the docs][d].\n\n[d]: https://example.com\n"
