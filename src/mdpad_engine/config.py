"""Engine configuration: page geometry and timing constants."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from mdpad_engine.runtime.telemetry import env

# A4-ish page at 96dpi: 11in tall, 8.5in wide, 72px padding on every side.
PAGE_HEIGHT = 1056
PAGE_WIDTH = 816
PAGE_PADDING = 144
CONTENT_HEIGHT = PAGE_HEIGHT - PAGE_PADDING
CONTENT_WIDTH = PAGE_WIDTH - PAGE_PADDING

DEFAULT_RENDER_DELAY_MS = 150
DEFAULT_CHECKPOINT_DELAY_MS = 500
DEFAULT_HISTORY_LIMIT = 100
DEFAULT_SPLIT_PERCENT = 50.0


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """Fixed page box; only the content area takes part in pagination."""

    page_height: float = PAGE_HEIGHT
    page_width: float = PAGE_WIDTH
    vertical_padding: float = PAGE_PADDING
    horizontal_padding: float = PAGE_PADDING

    def __post_init__(self) -> None:
        if self.content_height <= 0:
            raise ValueError("page padding leaves no vertical content area")
        if self.content_width <= 0:
            raise ValueError("page padding leaves no horizontal content area")

    @property
    def content_height(self) -> float:
        return self.page_height - self.vertical_padding

    @property
    def content_width(self) -> float:
        return self.page_width - self.horizontal_padding


@dataclass(frozen=True, slots=True)
class EngineConfig:
    render_delay_ms: int = DEFAULT_RENDER_DELAY_MS
    checkpoint_delay_ms: int = DEFAULT_CHECKPOINT_DELAY_MS
    history_limit: int = DEFAULT_HISTORY_LIMIT
    split_percent: float = DEFAULT_SPLIT_PERCENT
    geometry: PageGeometry = field(default_factory=PageGeometry)

    def __post_init__(self) -> None:
        if self.render_delay_ms < 0 or self.checkpoint_delay_ms < 0:
            raise ValueError("debounce delays must be non-negative")
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")

    @classmethod
    def from_env(cls, **overrides: object) -> "EngineConfig":
        """Build a config from ``MDPAD_ENGINE_*`` variables, then ``overrides``."""

        config = cls(
            render_delay_ms=_env_int("RENDER_DELAY_MS", DEFAULT_RENDER_DELAY_MS),
            checkpoint_delay_ms=_env_int(
                "CHECKPOINT_DELAY_MS", DEFAULT_CHECKPOINT_DELAY_MS
            ),
            history_limit=_env_int("HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
        )
        return replace(config, **overrides) if overrides else config


def _env_int(key: str, fallback: int) -> int:
    value = env(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


__all__ = [
    "CONTENT_HEIGHT",
    "CONTENT_WIDTH",
    "EngineConfig",
    "PAGE_HEIGHT",
    "PAGE_PADDING",
    "PAGE_WIDTH",
    "PageGeometry",
]
