"""UI-agnostic Markdown editing engine."""

__all__ = [
    "adapters",
    "buffer",
    "config",
    "markdown",
    "runtime",
    "utils",
]

__version__ = "0.1.0"
