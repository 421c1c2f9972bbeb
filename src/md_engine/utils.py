"""Small text and file helpers used around the editor."""

from __future__ import annotations

from os import PathLike
from pathlib import PurePath

MARKDOWN_EXTENSIONS = frozenset({"md", "markdown", "mdown", "mkd", "mkdn", "mdwn"})
TEXT_EXTENSIONS = frozenset({"txt", "md", "markdown", "rst", "text"})
_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")
_UNSAFE_FILENAME_CHARS = set('<>:"/\\|?*')


def _extension(path: str | PathLike[str]) -> str:
    return PurePath(path).suffix.lstrip(".").lower()


def is_markdown_file(path: str | PathLike[str]) -> bool:
    return _extension(path) in MARKDOWN_EXTENSIONS


def is_text_file(path: str | PathLike[str]) -> bool:
    """Known text extensions, plus any file without an extension."""

    ext = _extension(path)
    return not ext or ext in TEXT_EXTENSIONS


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 B"
    exp = 0
    while exp < len(_SIZE_UNITS) - 1 and size >= 1024 ** (exp + 1):
        exp += 1
    if exp == 0:
        return f"{size} B"
    return f"{size / 1024 ** exp:.2f} {_SIZE_UNITS[exp]}"


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def count_words(text: str) -> int:
    return len(text.split())


def count_lines(text: str) -> int:
    return len(text.splitlines())


def truncate_text(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max(max_len - 3, 0)] + "..."


def sanitize_filename(name: str) -> str:
    return "".join("_" if char in _UNSAFE_FILENAME_CHARS else char for char in name)


__all__ = [
    "MARKDOWN_EXTENSIONS",
    "TEXT_EXTENSIONS",
    "count_lines",
    "count_words",
    "format_file_size",
    "is_markdown_file",
    "is_text_file",
    "normalize_line_endings",
    "sanitize_filename",
    "truncate_text",
]
