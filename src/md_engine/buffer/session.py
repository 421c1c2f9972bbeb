"""Editing session façade combining text store, cursor, history and renderer."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import ContextManager, Optional, Tuple

from md_engine.config import EditorConfig
from md_engine.markdown.elements import RenderedElement
from md_engine.markdown.renderer import MarkdownRenderer
from md_engine.runtime import telemetry

from .errors import DocumentIOError
from .history import Edit, EditHistory
from .state import Cursor, CursorState, Selection
from .store import TextStore


@dataclass(slots=True)
class SessionView:
    version: int
    text: str
    cursor: Cursor
    selection: Optional[Selection]
    dirty: bool


class EditorSession:
    """One open document: owns its store, cursor, history and dirty flag.

    Offsets passed to the edit methods are logical UTF-8 byte offsets.
    Cursor positions are ``(line, byte column)`` pairs, both 0-indexed.
    """

    def __init__(
        self,
        *,
        name: str = "untitled",
        config: Optional[EditorConfig] = None,
        renderer: Optional[MarkdownRenderer] = None,
    ) -> None:
        self.name = name
        self.config = config or EditorConfig()
        self.store = TextStore(initial_gap=self.config.initial_gap)
        self.history = EditHistory(self.config.history_limit)
        self.state = CursorState()
        self.renderer = renderer or MarkdownRenderer()
        self.path: Optional[Path] = None
        self.version = 0
        self._dirty = False

    @classmethod
    def from_text(cls, text: str, **kwargs) -> "EditorSession":
        session = cls(**kwargs)
        session.set_text(text)
        return session

    # ------------------------------------------------------------------
    # Document access
    # ------------------------------------------------------------------
    def text(self) -> str:
        return self.store.as_text()

    def set_text(self, text: str) -> None:
        """Replace the whole document; history and cursor start over."""

        self.store = TextStore.from_text(text)
        self.history.clear()
        self.state.reset()
        self.version += 1
        self._dirty = False

    def is_dirty(self) -> bool:
        return self._dirty

    def open_file(self, path: str | PathLike[str]) -> None:
        target = Path(path)
        try:
            text = target.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentIOError(f"Cannot open {target}: {exc}", path=target) from exc
        self.set_text(text)
        self.path = target

    def save_file(self, path: Optional[str | PathLike[str]] = None) -> None:
        if path is None and self.path is None:
            raise DocumentIOError("No path to save the document to")
        target = Path(path) if path is not None else self.path
        assert target is not None
        try:
            target.write_bytes(self.store.as_bytes())
        except OSError as exc:
            raise DocumentIOError(f"Cannot save {target}: {exc}", path=target) from exc
        self.path = target
        self._dirty = False

    def render(self) -> Tuple[RenderedElement, ...]:
        return self.renderer.render(self.text())

    def snapshot(self) -> SessionView:
        return SessionView(
            version=self.version,
            text=self.text(),
            cursor=self.state.cursor,
            selection=self.state.selection,
            dirty=self._dirty,
        )

    # ------------------------------------------------------------------
    # Cursor and selection
    # ------------------------------------------------------------------
    def cursor_position(self) -> Cursor:
        return self.state.cursor

    def cursor_offset(self) -> int:
        return self.state.offset

    def set_cursor(self, line: int, col: int) -> Cursor:
        self._place_at(self.store.byte_from_line_col(line, col))
        self.state.preferred_column = None
        return self.state.cursor

    def set_cursor_offset(self, offset: int) -> Cursor:
        self._place_at(offset)
        self.state.preferred_column = None
        return self.state.cursor

    def _place_at(self, offset: int) -> None:
        offset = self.store.align_to_char(offset)
        self.state.place(self.store.line_col_from_byte(offset), offset)

    def move_left(self) -> Cursor:
        return self.set_cursor_offset(self.store.prev_char_offset(self.state.offset))

    def move_right(self) -> Cursor:
        return self.set_cursor_offset(self.store.next_char_offset(self.state.offset))

    def move_up(self) -> Cursor:
        return self._move_vertical(-1)

    def move_down(self) -> Cursor:
        return self._move_vertical(1)

    def _move_vertical(self, delta: int) -> Cursor:
        line, col = self.state.cursor
        target = line + delta
        if target < 0 or target >= self.store.line_count():
            return self.state.cursor
        preferred = self.state.preferred_column
        if preferred is None:
            current = self.store.line_text(line) or ""
            preferred = len(current.encode("utf-8")[:col].decode("utf-8", "ignore"))
        target_text = self.store.line_text(target) or ""
        byte_col = len(target_text[:preferred].encode("utf-8"))
        self._place_at(self.store.byte_from_line_col(target, byte_col))
        self.state.preferred_column = preferred
        return self.state.cursor

    def move_line_start(self) -> Cursor:
        return self.set_cursor(self.state.cursor[0], 0)

    def move_line_end(self) -> Cursor:
        line = self.state.cursor[0]
        text = self.store.line_text(line) or ""
        return self.set_cursor(line, len(text.encode("utf-8")))

    @property
    def selection(self) -> Optional[Selection]:
        return self.state.selection

    def select(self, anchor: int, head: int) -> None:
        anchor = self.store.align_to_char(anchor)
        head = self.store.align_to_char(head)
        self.state.set_selection(anchor, head)
        self._place_at(head)

    def clear_selection(self) -> None:
        self.state.clear_selection()

    def selected_text(self) -> str:
        bounds = self.state.selection_bounds()
        if bounds is None:
            return ""
        return self.store.text_range(*bounds)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def replace_range(
        self, start: int, end: int, text: str, *, label: str = "replace_range"
    ) -> Optional[Edit]:
        """Replace ``[start, end)`` with ``text`` and record the edit.

        Offsets are clamped to the document, and an offset inside a
        multi-byte character moves back to that character's start. Returns
        ``None`` when nothing would change.
        """

        start = self.store.align_to_char(start)
        end = self.store.align_to_char(end)
        if start > end:
            start, end = end, start
        return self._apply(start, end, text, label=label)

    def delete_range(self, start: int, end: int) -> Optional[Edit]:
        return self.replace_range(start, end, "", label="delete_range")

    def insert_text(self, text: str) -> Optional[Edit]:
        """Type ``text`` at the cursor, replacing the selection if any."""

        bounds = self.state.selection_bounds()
        if bounds is not None:
            return self._apply(bounds[0], bounds[1], text, label="insert_text")
        offset = self.state.offset
        return self._apply(
            offset,
            offset,
            text,
            label="insert_text",
            cursor_after=_advance(self.state.cursor, text),
        )

    def insert_newline(self) -> Optional[Edit]:
        indent = ""
        if self.config.auto_indent and self.state.selection is None:
            line = self.store.line_text(self.state.cursor[0]) or ""
            prefix = line.encode("utf-8")[: self.state.cursor[1]].decode("utf-8", "ignore")
            indent = prefix[: len(prefix) - len(prefix.lstrip(" \t"))]
        return self.insert_text("\n" + indent)

    def insert_tab(self) -> Optional[Edit]:
        return self.insert_text(self.config.indent_unit)

    def backspace(self) -> Optional[Edit]:
        bounds = self.state.selection_bounds()
        if bounds is not None:
            return self._apply(bounds[0], bounds[1], "", label="backspace")
        offset = self.state.offset
        if offset == 0:
            return None
        start = self.store.prev_char_offset(offset)
        removed = self.store.text_range(start, offset)
        cursor_after = None
        if "\n" not in removed:
            line, col = self.state.cursor
            cursor_after = (line, col - (offset - start))
        return self._apply(start, offset, "", label="backspace", cursor_after=cursor_after)

    def delete_forward(self) -> Optional[Edit]:
        bounds = self.state.selection_bounds()
        if bounds is not None:
            return self._apply(bounds[0], bounds[1], "", label="delete_forward")
        offset = self.state.offset
        end = self.store.next_char_offset(offset)
        if end == offset:
            return None
        return self._apply(
            offset, end, "", label="delete_forward", cursor_after=self.state.cursor
        )

    def _apply(
        self,
        start: int,
        end: int,
        text: str,
        *,
        label: str,
        cursor_after: Optional[Cursor] = None,
    ) -> Optional[Edit]:
        if start == end and not text:
            return None
        with Transaction(self, label) as tx:
            old_text = self.store.text_range(start, end)
            cursor_before = self.state.cursor
            self.store.replace_range(start, end, text)
            offset = start + len(text.encode("utf-8"))
            if cursor_after is None:
                self._place_at(offset)
            else:
                self.state.place(cursor_after, offset)
            self.state.clear_selection()
            self.state.preferred_column = None
            edit = Edit(
                old_text=old_text,
                new_text=text,
                position=start,
                cursor_before=cursor_before,
                cursor_after=self.state.cursor,
            )
            tx.commit(edit)
        return edit

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def undo(self) -> bool:
        """Revert the latest edit; ``False`` when there is nothing to undo."""

        edit = self.history.undo()
        if edit is None:
            return False
        with telemetry.span("session::undo", metadata={"session": self.name}):
            self.store.replace_range(
                edit.position, edit.position + edit.new_length, edit.old_text
            )
            self._restore(edit.cursor_before)
        return True

    def redo(self) -> bool:
        edit = self.history.redo()
        if edit is None:
            return False
        with telemetry.span("session::redo", metadata={"session": self.name}):
            self.store.replace_range(
                edit.position, edit.position + edit.old_length, edit.new_text
            )
            self._restore(edit.cursor_after)
        return True

    def _restore(self, cursor: Cursor) -> None:
        self.state.clear_selection()
        self.state.preferred_column = None
        self._place_at(self.store.byte_from_line_col(*cursor))
        self.version += 1
        self._dirty = True


class Transaction(AbstractContextManager["Transaction"]):
    """Profiles one session edit and records it in the history on commit."""

    def __init__(self, session: EditorSession, label: str) -> None:
        self.session = session
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"session::{self.label}",
            component=True,
            metadata={"session": self.session.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, edit: Edit) -> None:
        self.session.history.push(edit)
        self.session.version += 1
        self.session._dirty = True

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _advance(cursor: Cursor, text: str) -> Cursor:
    """Cursor position after typing ``text`` at ``cursor``."""

    line, col = cursor
    newlines = text.count("\n")
    if not newlines:
        return (line, col + len(text.encode("utf-8")))
    tail = text.rsplit("\n", 1)[1]
    return (line + newlines, len(tail.encode("utf-8")))


__all__ = ["EditorSession", "SessionView", "Transaction"]
