from __future__ import annotations

import pytest

from mdpad_engine.config import EngineConfig, PageGeometry
from mdpad_engine.sync import (
    ModeMachine,
    PanelLayout,
    ScrollMetrics,
    ScrollSync,
    ViewMode,
    compute_stats,
)


@pytest.mark.parametrize(
    ("mode", "layout"),
    [
        (ViewMode.RAW, PanelLayout(100.0, 0.0)),
        (ViewMode.SPLIT, PanelLayout(50.0, 50.0)),
        (ViewMode.PREVIEW, PanelLayout(0.0, 100.0)),
        (ViewMode.EDIT_PAGE, PanelLayout(0.0, 100.0)),
    ],
)
def test_mode_layouts(mode: ViewMode, layout: PanelLayout) -> None:
    machine = ModeMachine()

    assert machine.transition(mode).layout == layout


def test_transition_flags() -> None:
    machine = ModeMachine(ViewMode.PREVIEW)

    entered = machine.transition("edit_page")
    repeated = machine.transition(ViewMode.EDIT_PAGE)
    left = machine.transition(ViewMode.RAW)

    assert entered.entered_edit and not entered.left_edit
    assert not repeated.changed and not repeated.entered_edit
    assert left.left_edit


def test_unknown_mode_rejected() -> None:
    with pytest.raises(ValueError):
        ModeMachine().transition("wysiwyg")


def test_only_edit_page_renders_editable() -> None:
    assert [mode for mode in ViewMode if mode.renders_editable] == [ViewMode.EDIT_PAGE]


def test_split_percent_clamped_at_construction() -> None:
    assert ModeMachine(split_percent=99).split_percent == 80.0


@pytest.mark.parametrize(
    ("text", "cursor", "expected"),
    [
        ("", 0, (0, 0, 1, 1)),
        ("  hello   world  ", 0, (2, 17, 1, 1)),
        ("a\nbc\ndef", 6, (3, 8, 3, 2)),
        ("short", 99, (1, 5, 1, 6)),
    ],
)
def test_compute_stats(text: str, cursor: int, expected: tuple) -> None:
    stats = compute_stats(text, cursor)

    assert (stats.words, stats.characters, stats.line, stats.column) == expected


def test_scroll_maps_fraction_and_swallows_echo() -> None:
    sync = ScrollSync()
    raw = ScrollMetrics(offset=50, content_height=300, viewport_height=100)
    pages = ScrollMetrics(offset=0, content_height=1100, viewport_height=100)

    assert sync.on_scroll("raw", raw, pages) == pytest.approx(250.0)
    assert sync.on_scroll("pages", pages, raw) is None
    assert sync.on_scroll("pages", pages, raw) == pytest.approx(0.0)


def test_disabled_scroll_sync_does_nothing() -> None:
    sync = ScrollSync(enabled=False)
    metrics = ScrollMetrics(offset=10, content_height=20, viewport_height=30)

    assert metrics.fraction == 0.0
    assert sync.on_scroll("raw", metrics, metrics) is None


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MDPAD_ENGINE_HISTORY_LIMIT", "7")
    monkeypatch.setenv("MDPAD_ENGINE_RENDER_DELAY_MS", "40")

    config = EngineConfig.from_env(split_percent=30.0)

    assert config.history_limit == 7
    assert config.render_delay_ms == 40
    assert config.checkpoint_delay_ms == 500
    assert config.split_percent == 30.0


def test_geometry_content_area() -> None:
    geometry = PageGeometry()

    assert geometry.content_height == 912
    assert geometry.content_width == 672
    with pytest.raises(ValueError):
        PageGeometry(page_height=100, vertical_padding=100)


def test_config_rejects_bad_values() -> None:
    with pytest.raises(ValueError):
        EngineConfig(history_limit=0)
    with pytest.raises(ValueError):
        EngineConfig(render_delay_ms=-1)
