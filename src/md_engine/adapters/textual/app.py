"""Executable Textual app: Markdown source on the left, preview on the right."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use md_engine.adapters.textual.app"
    ) from exc

from md_engine.buffer import DocumentIOError, EditorSession, SessionView
from md_engine.config import EditorConfig
from md_engine.markdown import RenderedElement

from .controller import TextualEditorAdapter, TextualUIHooks, format_elements, format_source


@dataclass
class UIState:
    editor_text: str = ""
    preview_text: str = ""
    status_text: str = ""


class MarkdownEditorApp(App[None]):
    """Minimal Textual UI embedding the editing engine."""

    CSS = """
	#panes {
		height: 1fr;
	}

	#editor-view, #preview-view {
		width: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+s", "save", "Save"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, path: Optional[str] = None, config: Optional[EditorConfig] = None) -> None:
        super().__init__()
        self._state = UIState()
        self._path = path
        self.session = EditorSession(name=path or "untitled", config=config)
        self.adapter: TextualEditorAdapter | None = None
        self._editor_widget: Static | None = None
        self._preview_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="panes"):
            self._editor_widget = Static("", id="editor-view", markup=False)
            self._preview_widget = Static("", id="preview-view", markup=False)
            yield self._editor_widget
            yield self._preview_widget
        self._status_widget = Static("", id="status-line", markup=False)
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        if self._path:
            try:
                self.session.open_file(self._path)
            except DocumentIOError as exc:
                self._update_status(str(exc))
        hooks = TextualUIHooks(
            update_editor=self._update_editor,
            update_preview=self._update_preview,
            update_status=self._update_status,
        )
        self.adapter = TextualEditorAdapter(self.session, hooks)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key in {"ctrl+s", "ctrl+q"}:
            return
        if self.adapter.handle_textual_key(event.key, text=event.character):
            event.stop()

    def action_save(self) -> None:
        try:
            self.session.save_file()
        except DocumentIOError as exc:
            self._update_status(str(exc))
            return
        self._update_status(f"saved {self.session.path}")

    def on_resize(self, event: events.Resize) -> None:
        if self.adapter:
            self.adapter.refresh()

    def _update_editor(self, view: SessionView) -> None:
        config = self.session.config
        wrap_width = None
        if config.word_wrap and self._editor_widget is not None:
            gutter = len(str(view.text.count("\n") + 1)) + 1 if config.show_line_numbers else 0
            wrap_width = self._editor_widget.content_size.width - gutter
        rows = format_source(
            view, line_numbers=config.show_line_numbers, wrap_width=wrap_width
        )
        self._state.editor_text = "\n".join(rows)
        if self._editor_widget:
            # Rows are already wrapped, the widget only crops.
            self._editor_widget.update(
                Text(self._state.editor_text, no_wrap=True, overflow="crop")
            )

    def _update_preview(self, elements: Sequence[RenderedElement]) -> None:
        self._state.preview_text = "\n".join(format_elements(elements))
        if self._preview_widget:
            self._preview_widget.update(self._state.preview_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit and preview a Markdown file.")
    parser.add_argument("path", nargs="?", help="Markdown file to open")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    app = MarkdownEditorApp(path=args.path, config=EditorConfig.from_env())
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
