"""Preview helpers computed from a rendered element tree."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .elements import BlockQuote, Heading, OrderedList, Paragraph, RenderedElement, UnorderedList

WORDS_PER_MINUTE = 200


def generate_toc(elements: Iterable[RenderedElement]) -> List[Tuple[int, str]]:
    """Return ``(level, text)`` for every top-level heading, in order."""

    return [
        (element.level, element.text)
        for element in elements
        if isinstance(element, Heading)
    ]


def word_count(elements: Iterable[RenderedElement]) -> int:
    return sum(_count_words(element) for element in elements)


def _count_words(element: RenderedElement) -> int:
    if isinstance(element, (Paragraph, Heading)):
        return len(element.text.split())
    if isinstance(element, BlockQuote):
        return word_count(element.children)
    if isinstance(element, (UnorderedList, OrderedList)):
        return sum(word_count(item) for item in element.items)
    return 0


def estimate_reading_time(words: int) -> int:
    """Reading time in whole minutes, never less than one."""

    return max(1, words // WORDS_PER_MINUTE)


__all__ = ["WORDS_PER_MINUTE", "estimate_reading_time", "generate_toc", "word_count"]
