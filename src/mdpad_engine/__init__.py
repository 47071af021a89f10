"""UI-agnostic paged markdown editing engine."""

__all__ = [
    "adapters",
    "config",
    "history",
    "layout",
    "rendering",
    "runtime",
    "surfaces",
    "sync",
]

__version__ = "0.1.0"
