"""Markdown event stream, renderer and preview helpers."""

from .elements import (
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
from .events import Event, EventKind, Tag, create_parser, iter_events
from .highlight import HighlightedLine, HighlightToken, MarkdownHighlighter, TokenStyle
from .outline import estimate_reading_time, generate_toc, word_count
from .renderer import MarkdownRenderer, build_tree, render

__all__ = [
    "BlockQuote",
    "CodeBlock",
    "Emphasis",
    "Event",
    "EventKind",
    "Heading",
    "HighlightToken",
    "HighlightedLine",
    "HorizontalRule",
    "Image",
    "InlineCode",
    "LineBreak",
    "Link",
    "MarkdownHighlighter",
    "MarkdownRenderer",
    "OrderedList",
    "Paragraph",
    "RawHtml",
    "RenderedElement",
    "Strikethrough",
    "Strong",
    "Tag",
    "TokenStyle",
    "UnorderedList",
    "build_tree",
    "create_parser",
    "estimate_reading_time",
    "generate_toc",
    "iter_events",
    "render",
    "word_count",
]
