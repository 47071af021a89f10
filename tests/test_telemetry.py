from __future__ import annotations

import pytest

from mdpad_engine.runtime import telemetry


def test_unknown_preset_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_presets_are_what_the_cli_offers() -> None:
    assert sorted(telemetry.PRESETS) == ["debug", "quiet"]


def test_span_fails_and_reraises() -> None:
    with pytest.raises(KeyError):
        with telemetry.span("test::span", metadata={"k": 1}) as handle:
            handle.add_metadata("pages", 2)
            raise KeyError("boom")

    assert handle.metadata == {"k": "1", "pages": "2"}


def test_unsupported_level_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.record_event("test.event", level="shout")
