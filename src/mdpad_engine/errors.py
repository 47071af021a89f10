"""Recoverable failures raised inside a render or sync pass."""

from __future__ import annotations

from typing import Optional


class EngineError(RuntimeError):
    """Base class; the controller catches these and keeps the source intact."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class RenderFailure(EngineError):
    """The markdown renderer or the sanitizer raised."""


class ConversionFailure(EngineError):
    """Structured content could not be turned back into markdown."""


class MeasurementFailure(EngineError):
    """The staging area could not be acquired or could not measure a block."""


__all__ = ["ConversionFailure", "EngineError", "MeasurementFailure", "RenderFailure"]
