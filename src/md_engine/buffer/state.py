"""Cursor and selection state for an editing session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Cursor = Tuple[int, int]  # (line, byte column)
Selection = Tuple[int, int]  # (anchor offset, head offset)


@dataclass(slots=True)
class CursorState:
    """Cursor kept both as ``(line, col)`` and as a logical byte offset.

    The two are always updated together so that typing at the cursor never
    needs a line-index lookup.
    """

    cursor: Cursor = (0, 0)
    offset: int = 0
    selection: Optional[Selection] = None
    # Character column kept while moving vertically.
    preferred_column: Optional[int] = None

    def place(self, cursor: Cursor, offset: int) -> None:
        self.cursor = cursor
        self.offset = offset

    def clear_selection(self) -> None:
        self.selection = None

    def set_selection(self, anchor: int, head: int) -> None:
        self.selection = (anchor, head)

    def selection_bounds(self) -> Optional[Tuple[int, int]]:
        if self.selection is None:
            return None
        anchor, head = self.selection
        return (anchor, head) if anchor <= head else (head, anchor)

    def reset(self) -> None:
        self.cursor = (0, 0)
        self.offset = 0
        self.selection = None
        self.preferred_column = None
