"""Hooks-based adapter that drives an EditorSession from Textual key events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from md_engine.buffer import EditorSession, SessionView
from md_engine.markdown import (
    BlockQuote,
    CodeBlock,
    Emphasis,
    Heading,
    HorizontalRule,
    Image,
    InlineCode,
    LineBreak,
    Link,
    OrderedList,
    Paragraph,
    RawHtml,
    RenderedElement,
    Strikethrough,
    Strong,
    UnorderedList,
)


CURSOR_MARK = "│"


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_editor: Callable[[SessionView], None]
    update_preview: Callable[[Sequence[RenderedElement]], None] = _noop
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualEditorAdapter:
    """Bridges Textual key names to session edits and pushes fresh views."""

    def __init__(
        self,
        session: EditorSession,
        hooks: TextualUIHooks,
        *,
        live_preview: bool = True,
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.live_preview = live_preview
        self._rendered_version: Optional[int] = None
        self._commands: Dict[str, Callable[[], object]] = {
            "left": session.move_left,
            "right": session.move_right,
            "up": session.move_up,
            "down": session.move_down,
            "home": session.move_line_start,
            "end": session.move_line_end,
            "enter": session.insert_newline,
            "tab": session.insert_tab,
            "backspace": session.backspace,
            "delete": session.delete_forward,
            "ctrl+z": self._undo,
            "ctrl+y": self._redo,
        }
        self.refresh()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> bool:
        """Apply a key press; returns ``False`` when the key is not handled."""

        names = [str(mod).lower() for mod in modifiers]
        name = "+".join([*names, key.lower()]) if names else key.lower()
        self._log_state("key ->", key=name, text=text)

        command = self._commands.get(name)
        if command is not None:
            command()
        elif text is not None and len(text) == 1 and text.isprintable():
            self.session.insert_text(text)
        else:
            return False

        self.refresh()
        return True

    def refresh(self) -> None:
        view = self.session.snapshot()
        self.hooks.update_editor(view)
        line, col = view.cursor
        marker = " [+]" if view.dirty else ""
        self.hooks.update_status(f"{self.session.name}{marker}  Ln {line + 1}, Col {col + 1}")
        if self.live_preview and view.version != self._rendered_version:
            self.refresh_preview()

    def refresh_preview(self) -> None:
        elements = self.session.render()
        self._rendered_version = self.session.version
        self.hooks.update_preview(elements)
        self._log_state("preview <-", elements=len(elements))

    def _undo(self) -> None:
        if not self.session.undo():
            self.hooks.update_status("nothing to undo")

    def _redo(self) -> None:
        if not self.session.redo():
            self.hooks.update_status("nothing to redo")

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "cursor": self.session.cursor_position(),
            "version": self.session.version,
            "dirty": self.session.is_dirty(),
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))


def format_source(
    view: SessionView,
    *,
    line_numbers: bool = True,
    wrap_width: Optional[int] = None,
    cursor_mark: str = CURSOR_MARK,
) -> List[str]:
    """Source pane rows: cursor mark, optional gutter and soft wrapping.

    ``wrap_width`` is the number of columns left for text after the gutter.
    ``None`` keeps every line on one row and leaves cropping to the widget.
    """

    lines = view.text.split("\n")
    line, col = view.cursor
    if line < len(lines):
        head = lines[line].encode("utf-8")[:col].decode("utf-8", "ignore")
        lines[line] = head + cursor_mark + lines[line][len(head):]

    gutter = len(str(len(lines)))
    rows: List[str] = []
    for number, text in enumerate(lines, 1):
        chunks = _wrap(text, wrap_width)
        if not line_numbers:
            rows.extend(chunks)
            continue
        rows.append(f"{number:>{gutter}} {chunks[0]}")
        rows.extend(f"{'':>{gutter}} {chunk}" for chunk in chunks[1:])
    return rows


def _wrap(text: str, width: Optional[int]) -> List[str]:
    if width is None or width < 1 or len(text) <= width:
        return [text]
    return [text[index : index + width] for index in range(0, len(text), width)]


def format_elements(elements: Iterable[RenderedElement], indent: str = "") -> List[str]:
    """Flatten an element tree into plain preview lines."""

    lines: List[str] = []
    for element in elements:
        if isinstance(element, Heading):
            lines.append(f"{indent}{'#' * element.level} {element.text}")
        elif isinstance(element, Paragraph):
            lines.extend(f"{indent}{part}" for part in element.text.split("\n"))
        elif isinstance(element, CodeBlock):
            lines.append(f"{indent}```{element.language}")
            lines.extend(f"{indent}{part}" for part in element.code.rstrip("\n").split("\n"))
            lines.append(f"{indent}```")
        elif isinstance(element, InlineCode):
            lines.append(f"{indent}`{element.text}`")
        elif isinstance(element, BlockQuote):
            lines.extend(format_elements(element.children, indent + "> "))
        elif isinstance(element, (UnorderedList, OrderedList)):
            lines.extend(_format_list(element, indent))
        elif isinstance(element, HorizontalRule):
            lines.append(f"{indent}---")
        elif isinstance(element, Link):
            lines.append(f"{indent}{element.text} <{element.url}>")
        elif isinstance(element, Image):
            lines.append(f"{indent}[image: {element.alt}] {element.url}")
        elif isinstance(element, RawHtml):
            lines.append(f"{indent}{element.html.rstrip()}")
        elif isinstance(element, LineBreak):
            lines.append(indent.rstrip())
        elif isinstance(element, Strong):
            lines.append(f"{indent}**{element.text}**")
        elif isinstance(element, Emphasis):
            lines.append(f"{indent}*{element.text}*")
        elif isinstance(element, Strikethrough):
            lines.append(f"{indent}~~{element.text}~~")
    return lines


def _format_list(element: UnorderedList | OrderedList, indent: str) -> List[str]:
    lines: List[str] = []
    for number, item in enumerate(element.items):
        if isinstance(element, OrderedList):
            bullet = f"{element.start + number}. "
        else:
            bullet = "- "
        body = format_elements(item, indent + " " * len(bullet))
        if body:
            body[0] = f"{indent}{bullet}{body[0][len(indent) + len(bullet):]}"
        else:
            body = [f"{indent}{bullet}".rstrip()]
        lines.extend(body)
    return lines


__all__ = [
    "CURSOR_MARK",
    "TextualEditorAdapter",
    "TextualUIHooks",
    "format_elements",
    "format_source",
]
