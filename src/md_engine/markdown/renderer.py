"""Assemble the flat Markdown event stream into a nested element tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from markdown_it import MarkdownIt

from md_engine.runtime import telemetry

from .elements import (
    BlockQuote,
    CodeBlock,
    Emphasis,
    Heading,
    HorizontalRule,
    Image,
    InlineCode,
    InlineSpan,
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
from .events import Event, EventKind, Tag, create_parser, iter_events


@dataclass(slots=True)
class _PendingBlock:
    """Paragraph, heading or code block still collecting text."""

    tag: Tag
    parts: List[str] = field(default_factory=list)
    spans: List[InlineSpan] = field(default_factory=list)
    level: int = 0
    language: str = ""
    # Reopened after inline code split the block.
    continued: bool = False

    def is_leftover(self) -> bool:
        return self.continued and not self.parts and not self.spans

    def build(self) -> RenderedElement:
        text = "".join(self.parts)
        if self.tag is Tag.CODE_BLOCK:
            return CodeBlock(self.language, text)
        if self.tag is Tag.HEADING:
            return Heading(self.level, text, tuple(self.spans))
        return Paragraph(text, tuple(self.spans))


@dataclass(slots=True)
class _ListFrame:
    ordered: bool
    start: int
    items: List[List[RenderedElement]] = field(default_factory=list)

    def build(self) -> RenderedElement:
        items = tuple(tuple(item) for item in self.items)
        if self.ordered:
            return OrderedList(items, start=self.start)
        return UnorderedList(items)


@dataclass(slots=True)
class _OpenSpan:
    tag: Tag
    url: str = ""
    parts: List[str] = field(default_factory=list)

    def build(self) -> InlineSpan:
        text = "".join(self.parts)
        if self.tag is Tag.STRONG:
            return Strong(text)
        if self.tag is Tag.EMPHASIS:
            return Emphasis(text)
        if self.tag is Tag.STRIKETHROUGH:
            return Strikethrough(text)
        if self.tag is Tag.LINK:
            return Link(text, self.url)
        return Image(text, self.url)


_INLINE_SPAN_TAGS = {Tag.STRONG, Tag.EMPHASIS, Tag.STRIKETHROUGH, Tag.LINK, Tag.IMAGE}
_TEXT_BLOCK_TAGS = {Tag.PARAGRAPH, Tag.HEADING}


class _TreeBuilder:
    """Traversal state for a single render call.

    Where a finished element goes is decided by a fixed precedence: the
    innermost open list item, then the innermost open block quote, then the
    top level. Raw HTML, rules and stray line breaks always go to the top
    level; inline code skips block quotes.
    """

    def __init__(self) -> None:
        self.elements: List[RenderedElement] = []
        self.current: Optional[_PendingBlock] = None
        self.list_stack: List[_ListFrame] = []
        self.blockquote_stack: List[List[RenderedElement]] = []
        self.span_stack: List[_OpenSpan] = []

    def feed(self, events: Iterable[Event]) -> Tuple[RenderedElement, ...]:
        for event in events:
            self._dispatch(event)
        pending = self.current
        if pending is not None and not pending.is_leftover():
            self.elements.append(pending.build())
        self.current = None
        return tuple(self.elements)

    # ------------------------------------------------------------------
    # Destinations
    # ------------------------------------------------------------------
    def _list_item(self) -> Optional[List[RenderedElement]]:
        if self.list_stack and self.list_stack[-1].items:
            return self.list_stack[-1].items[-1]
        return None

    def _destination(self) -> List[RenderedElement]:
        item = self._list_item()
        if item is not None:
            return item
        if self.blockquote_stack:
            return self.blockquote_stack[-1]
        return self.elements

    def _flush(self) -> None:
        pending = self.current
        if pending is None:
            return
        self.current = None
        if pending.is_leftover():
            return
        self._destination().append(pending.build())

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def _dispatch(self, event: Event) -> None:
        kind = event.kind
        if kind is EventKind.START:
            self._start(event)
        elif kind is EventKind.END:
            self._end(event)
        elif kind is EventKind.TEXT:
            self._text(event.text)
        elif kind is EventKind.CODE:
            self._inline_code(event.text)
        elif kind is EventKind.HTML:
            self.elements.append(RawHtml(event.text))
        elif kind is EventKind.HARD_BREAK:
            if self.current is not None and self.current.tag is Tag.PARAGRAPH:
                self.current.parts.append("\n")
            else:
                self.elements.append(LineBreak())
        elif kind is EventKind.RULE:
            self.elements.append(HorizontalRule())
        # Soft breaks carry no structure.

    def _start(self, event: Event) -> None:
        tag = event.tag
        if tag is Tag.LIST:
            self._flush()
            ordered = event.start is not None
            self.list_stack.append(_ListFrame(ordered, event.start or 1))
        elif tag is Tag.ITEM:
            if self.list_stack:
                self.list_stack[-1].items.append([])
        elif tag is Tag.BLOCKQUOTE:
            self._flush()
            self.blockquote_stack.append([])
        elif tag is Tag.CODE_BLOCK:
            self._flush()
            self.current = _PendingBlock(Tag.CODE_BLOCK, language=event.language)
        elif tag in _TEXT_BLOCK_TAGS:
            self._flush()
            self.current = _PendingBlock(tag, level=event.level)  # type: ignore[arg-type]
        elif tag in _INLINE_SPAN_TAGS:
            self.span_stack.append(_OpenSpan(tag, url=event.url))  # type: ignore[arg-type]

    def _end(self, event: Event) -> None:
        tag = event.tag
        if tag is Tag.LIST:
            if self.list_stack:
                frame = self.list_stack.pop()
                self._flush()
                self._destination().append(frame.build())
        elif tag is Tag.BLOCKQUOTE:
            if self.blockquote_stack:
                children = self.blockquote_stack.pop()
                self._flush()
                self._destination().append(BlockQuote(tuple(children)))
        elif tag is Tag.CODE_BLOCK or tag in _TEXT_BLOCK_TAGS:
            self._flush()
        elif tag in _INLINE_SPAN_TAGS:
            self._close_span(tag)  # type: ignore[arg-type]

    def _close_span(self, tag: Tag) -> None:
        for index in range(len(self.span_stack) - 1, -1, -1):
            if self.span_stack[index].tag is tag:
                span = self.span_stack.pop(index)
                break
        else:
            return
        element = span.build()
        if self.current is not None:
            self.current.spans.append(element)
        else:
            self._destination().append(element)

    def _inline_code(self, text: str) -> None:
        """Split the open paragraph or heading around an inline code span.

        The code goes to the innermost list item, else the top level, never
        into a block quote; text after it continues in a fresh block of the
        same kind.
        """

        self._feed_spans(text)
        pending = self.current
        split = pending is not None and pending.tag in _TEXT_BLOCK_TAGS
        if split:
            assert pending is not None
            if pending.parts or pending.spans:
                self._flush()
            else:
                self.current = None
        target = self._list_item()
        (target if target is not None else self.elements).append(InlineCode(text))
        if split:
            self.current = _PendingBlock(pending.tag, level=pending.level, continued=True)

    def _feed_spans(self, text: str) -> None:
        for span in self.span_stack:
            span.parts.append(text)

    def _text(self, text: str) -> None:
        self._feed_spans(text)
        if self.current is not None:
            self.current.parts.append(text)
        else:
            self._destination().append(Paragraph(text))


def build_tree(events: Iterable[Event]) -> Tuple[RenderedElement, ...]:
    """Assemble an element tree from an already produced event stream."""

    return _TreeBuilder().feed(events)


class MarkdownRenderer:
    """Turn Markdown source into a tuple of :mod:`elements` values.

    The renderer keeps no state between calls: every call builds a fresh
    tree, and the caller owns it.
    """

    def __init__(self, parser: Optional[MarkdownIt] = None) -> None:
        self._parser = parser or create_parser()

    def events(self, markdown_text: str) -> List[Event]:
        return list(iter_events(markdown_text, self._parser))

    def render(self, markdown_text: str) -> Tuple[RenderedElement, ...]:
        with telemetry.span(
            "markdown::render", metadata={"chars": len(markdown_text)}
        ) as handle:
            elements = build_tree(iter_events(markdown_text, self._parser))
            handle.add_metadata("elements", len(elements))
        telemetry.record_event(
            "render.complete",
            level="debug",
            data={"chars": len(markdown_text), "elements": len(elements)},
        )
        return elements


_DEFAULT_RENDERER: Optional[MarkdownRenderer] = None


def render(markdown_text: str) -> Tuple[RenderedElement, ...]:
    """Render with a shared default :class:`MarkdownRenderer`."""

    global _DEFAULT_RENDERER
    if _DEFAULT_RENDERER is None:
        _DEFAULT_RENDERER = MarkdownRenderer()
    return _DEFAULT_RENDERER.render(markdown_text)


__all__ = ["MarkdownRenderer", "build_tree", "render"]
