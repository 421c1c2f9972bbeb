"""Flatten markdown-it token streams into start/end/text events.

markdown-it produces block tokens with nested ``inline`` tokens whose
children carry the inline markup. The renderer wants a single flat stream
instead, so block and inline tokens are walked in document order and each
one is translated into zero or more :class:`Event` values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token


class EventKind(str, Enum):
    START = "start"
    END = "end"
    TEXT = "text"
    CODE = "code"
    HTML = "html"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    RULE = "rule"


class Tag(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    ITEM = "item"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "code_block"
    STRONG = "strong"
    EMPHASIS = "emphasis"
    STRIKETHROUGH = "strikethrough"
    LINK = "link"
    IMAGE = "image"


@dataclass(frozen=True, slots=True)
class Event:
    kind: EventKind
    tag: Optional[Tag] = None
    text: str = ""
    level: int = 0
    language: str = ""
    # Only set for ordered lists: the explicit start number.
    start: Optional[int] = None
    url: str = ""


_BLOCK_TAGS = {
    "heading": Tag.HEADING,
    "paragraph": Tag.PARAGRAPH,
    "bullet_list": Tag.LIST,
    "ordered_list": Tag.LIST,
    "list_item": Tag.ITEM,
    "blockquote": Tag.BLOCKQUOTE,
}

_INLINE_TAGS = {
    "strong": Tag.STRONG,
    "em": Tag.EMPHASIS,
    "s": Tag.STRIKETHROUGH,
    "link": Tag.LINK,
}


def create_parser() -> MarkdownIt:
    """CommonMark parser with the strikethrough rule switched on."""

    return MarkdownIt("commonmark").enable("strikethrough")


def iter_events(text: str, parser: Optional[MarkdownIt] = None) -> Iterator[Event]:
    """Parse ``text`` and yield its events in document order."""

    md = parser or create_parser()
    yield from _block_events(md.parse(text))


def _block_events(tokens: Sequence[Token]) -> Iterator[Event]:
    for token in tokens:
        kind = token.type
        if kind == "inline":
            yield from _inline_events(token.children or ())
        elif kind in ("fence", "code_block"):
            language = _fence_language(token.info) if kind == "fence" else ""
            yield Event(EventKind.START, Tag.CODE_BLOCK, language=language)
            yield Event(EventKind.TEXT, text=token.content)
            yield Event(EventKind.END, Tag.CODE_BLOCK, language=language)
        elif kind == "hr":
            yield Event(EventKind.RULE)
        elif kind == "html_block":
            yield Event(EventKind.HTML, text=token.content)
        elif token.nesting != 0:
            base = kind.rsplit("_", 1)[0]
            tag = _BLOCK_TAGS.get(base)
            if tag is None:
                continue
            yield Event(
                EventKind.START if token.nesting == 1 else EventKind.END,
                tag,
                level=_heading_level(token) if tag is Tag.HEADING else 0,
                start=_list_start(token) if base == "ordered_list" else None,
            )


def _inline_events(children: Iterable[Token]) -> Iterator[Event]:
    for child in children:
        kind = child.type
        if kind in ("text", "text_special"):
            yield Event(EventKind.TEXT, text=child.content)
        elif kind == "code_inline":
            yield Event(EventKind.CODE, text=child.content)
        elif kind == "html_inline":
            yield Event(EventKind.HTML, text=child.content)
        elif kind == "softbreak":
            yield Event(EventKind.SOFT_BREAK)
        elif kind == "hardbreak":
            yield Event(EventKind.HARD_BREAK)
        elif kind == "image":
            url = str(child.attrGet("src") or "")
            yield Event(EventKind.START, Tag.IMAGE, url=url)
            yield from _inline_events(child.children or ())
            yield Event(EventKind.END, Tag.IMAGE, url=url)
        elif child.nesting != 0:
            tag = _INLINE_TAGS.get(kind.rsplit("_", 1)[0])
            if tag is None:
                continue
            url = str(child.attrGet("href") or "") if tag is Tag.LINK else ""
            yield Event(
                EventKind.START if child.nesting == 1 else EventKind.END,
                tag,
                url=url,
            )


def _fence_language(info: str) -> str:
    parts = info.strip().split(maxsplit=1)
    return parts[0] if parts else ""


def _heading_level(token: Token) -> int:
    try:
        return int(token.tag[1:])
    except ValueError:
        return 1


def _list_start(token: Token) -> int:
    raw = token.attrGet("start")
    return int(raw) if raw is not None else 1


__all__ = ["Event", "EventKind", "Tag", "create_parser", "iter_events"]
