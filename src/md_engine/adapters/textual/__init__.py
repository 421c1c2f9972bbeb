"""Textual adapter; the demo app lives in :mod:`.app` and needs the textual extra."""

from .controller import (
    CURSOR_MARK,
    TextualEditorAdapter,
    TextualUIHooks,
    format_elements,
    format_source,
)

__all__ = [
    "CURSOR_MARK",
    "TextualEditorAdapter",
    "TextualUIHooks",
    "format_elements",
    "format_source",
]
