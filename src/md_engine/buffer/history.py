"""Bounded undo/redo history of reversible edits."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional

from .state import Cursor

DEFAULT_HISTORY_LIMIT = 1000


@dataclass(frozen=True, slots=True)
class Edit:
    """Self-describing delta: ``new_text`` replaced ``old_text`` at ``position``."""

    old_text: str
    new_text: str
    position: int
    cursor_before: Cursor
    cursor_after: Cursor

    @property
    def old_length(self) -> int:
        return len(self.old_text.encode("utf-8"))

    @property
    def new_length(self) -> int:
        return len(self.new_text.encode("utf-8"))


class EditHistory:
    """Linear undo/redo stacks, each capped at ``max_size`` entries.

    Pushing a new edit drops everything on the redo stack. When a stack is
    full the oldest entry is evicted.
    """

    def __init__(self, max_size: int = DEFAULT_HISTORY_LIMIT) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.max_size = max_size
        self._undo: Deque[Edit] = deque(maxlen=max_size)
        self._redo: Deque[Edit] = deque(maxlen=max_size)

    def push(self, edit: Edit) -> None:
        self._undo.append(edit)
        self._redo.clear()

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> Optional[Edit]:
        if not self._undo:
            return None
        edit = self._undo.pop()
        self._redo.append(edit)
        return edit

    def redo(self) -> Optional[Edit]:
        if not self._redo:
            return None
        edit = self._redo.pop()
        self._undo.append(edit)
        return edit

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)


__all__ = ["DEFAULT_HISTORY_LIMIT", "Edit", "EditHistory"]
