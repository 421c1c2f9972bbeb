"""Line-level inline tokenizer for editor highlighting.

Only emphasis, strong, strikethrough and code spans are recognised, and the
scan is a single pass over one line: markers toggle a style flag and are
dropped from the output. Colours are left to the host; a token only says
which styles apply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True, slots=True)
class TokenStyle:
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    code: bool = False


@dataclass(frozen=True, slots=True)
class HighlightToken:
    text: str
    style: TokenStyle = field(default_factory=TokenStyle)


@dataclass(frozen=True, slots=True)
class HighlightedLine:
    tokens: Tuple[HighlightToken, ...]

    @property
    def text(self) -> str:
        return "".join(token.text for token in self.tokens)


class MarkdownHighlighter:
    def highlight_line(self, line: str) -> HighlightedLine:
        tokens: List[HighlightToken] = []
        current: List[str] = []
        bold = italic = strike = code = False

        def flush() -> None:
            if current:
                tokens.append(
                    HighlightToken(
                        "".join(current),
                        TokenStyle(bold=bold, italic=italic, strikethrough=strike, code=code),
                    )
                )
                current.clear()

        index = 0
        length = len(line)
        while index < length:
            char = line[index]
            doubled = index + 1 < length and line[index + 1] == char
            if char == "`":
                flush()
                code = not code
            elif char in "*_" and not code:
                flush()
                if doubled:
                    index += 1
                    bold = not bold
                else:
                    italic = not italic
            elif char == "~" and doubled and not code:
                flush()
                index += 1
                strike = not strike
            else:
                current.append(char)
            index += 1

        flush()
        if not tokens:
            tokens.append(HighlightToken(""))
        return HighlightedLine(tuple(tokens))

    def highlight_text(self, text: str) -> List[HighlightedLine]:
        return [self.highlight_line(line) for line in text.split("\n")]


__all__ = ["HighlightToken", "HighlightedLine", "MarkdownHighlighter", "TokenStyle"]
