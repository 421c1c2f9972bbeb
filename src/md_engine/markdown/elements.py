"""Immutable element tree produced by the Markdown renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True, slots=True)
class Strong:
    text: str


@dataclass(frozen=True, slots=True)
class Emphasis:
    text: str


@dataclass(frozen=True, slots=True)
class Strikethrough:
    text: str


@dataclass(frozen=True, slots=True)
class Link:
    text: str
    url: str


@dataclass(frozen=True, slots=True)
class Image:
    alt: str
    url: str


InlineSpan = Union[Strong, Emphasis, Strikethrough, Link, Image]


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    text: str
    # Inline markup met while the text accumulated, in document order.
    spans: Tuple[InlineSpan, ...] = ()


@dataclass(frozen=True, slots=True)
class Paragraph:
    text: str
    spans: Tuple[InlineSpan, ...] = ()


@dataclass(frozen=True, slots=True)
class CodeBlock:
    language: str
    code: str


@dataclass(frozen=True, slots=True)
class InlineCode:
    text: str


@dataclass(frozen=True, slots=True)
class BlockQuote:
    children: Tuple["RenderedElement", ...]


@dataclass(frozen=True, slots=True)
class UnorderedList:
    items: Tuple[Tuple["RenderedElement", ...], ...]


@dataclass(frozen=True, slots=True)
class OrderedList:
    items: Tuple[Tuple["RenderedElement", ...], ...]
    start: int = 1


@dataclass(frozen=True, slots=True)
class HorizontalRule:
    pass


@dataclass(frozen=True, slots=True)
class RawHtml:
    html: str


@dataclass(frozen=True, slots=True)
class LineBreak:
    pass


RenderedElement = Union[
    Heading,
    Paragraph,
    CodeBlock,
    InlineCode,
    BlockQuote,
    UnorderedList,
    OrderedList,
    HorizontalRule,
    Link,
    Image,
    RawHtml,
    LineBreak,
    Strong,
    Emphasis,
    Strikethrough,
]

__all__ = [
    "BlockQuote",
    "CodeBlock",
    "Emphasis",
    "Heading",
    "HorizontalRule",
    "Image",
    "InlineCode",
    "InlineSpan",
    "LineBreak",
    "Link",
    "OrderedList",
    "Paragraph",
    "RawHtml",
    "RenderedElement",
    "Strikethrough",
    "Strong",
    "UnorderedList",
]
