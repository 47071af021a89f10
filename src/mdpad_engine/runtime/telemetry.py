"""Engine telemetry on top of telelog.

Library code calls ``record_event`` for one-off facts (a mode switch, an
evicted snapshot, a failed render) and wraps whole passes in ``span`` so
telelog profiles them. Hosts pick the output with ``configure``: by default
the ``MDPAD_ENGINE_*`` environment decides; the Textual app selects a preset
because it owns the terminal.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "MDPAD_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "mdpad_engine")
DEBUG_LOG_FILE = "mdpad_engine.log"

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _env_config() -> Any:
    config = tl.Config()
    config.with_min_level((env("LOG_LEVEL") or "INFO").upper())
    console = not env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not env_flag("NO_COLOR", False))
    if env_flag("LOG_JSON", False):
        config.with_json_format(True)
    if env("LOG_FILE"):
        config.with_file_output(env("LOG_FILE"))
    if env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(int(env("LOG_BUFFER_SIZE") or "2048"))
    return config


def _quiet_config() -> Any:
    # Full-screen hosts draw over anything written to the console.
    config = tl.Config()
    config.with_min_level("WARNING")
    config.with_console_output(False)
    if env("LOG_FILE"):
        config.with_file_output(env("LOG_FILE"))
    return config


def _debug_config() -> Any:
    config = tl.Config()
    config.with_min_level("DEBUG")
    config.with_console_output(False)
    config.with_file_output(env("LOG_FILE") or DEBUG_LOG_FILE)
    return config


PRESETS: Dict[str, Callable[[], Any]] = {
    "quiet": _quiet_config,
    "debug": _debug_config,
}


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Install a telelog config and forget cached loggers.

    ``preset`` is a key of ``PRESETS``; ``config`` an explicit
    ``telelog.Config``. With neither, the environment is read again.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        try:
            config = PRESETS[preset.lower()]()
        except KeyError:
            raise ValueError(f"Unknown preset '{preset}'.") from None
    elif config is None:
        config = _env_config()

    config.with_profiling(True)
    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached ``telelog.Logger`` for ``name``."""

    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        configure()
    logger_name = name or DEFAULT_LOGGER_NAME
    logger = _LOGGER_CACHE.get(logger_name)
    if logger is None:
        logger = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
        _LOGGER_CACHE[logger_name] = logger
    return logger


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = str(level).lower()
    with_data = getattr(logger, f"{name}_with", None)
    if with_data is not None:
        with_data(message, [(str(k), _stringify(v)) for k, v in payload.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` as key/value pairs."""

    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by ``span``; collects metadata and reports trouble mid-pass."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def warn(self, reason: str) -> None:
        self._report("warning", "span::warn", reason)

    def fail(self, reason: str) -> None:
        self._report("error", "span::fail", reason)

    def _report(self, level: str, message: str, reason: str) -> None:
        payload = {"span": self.span_name, **self.metadata, "reason": reason}
        if self.component_name:
            payload["component"] = self.component_name
        _emit(self.logger, level, message, payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block; track it as a component when ``component`` is set.

    ``component=True`` uses ``name`` as the component. ``metadata`` becomes
    logger context until the block exits. An exception fails the span and
    propagates.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    context = {key: _stringify(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=log, span_name=name, component_name=component_name, metadata=dict(context)
    )

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "configure",
    "env",
    "env_flag",
    "get_logger",
    "record_event",
    "span",
]
