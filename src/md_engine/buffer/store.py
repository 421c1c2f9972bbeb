"""Gap-buffer text storage with a lazily rebuilt line index.

Text lives in a single ``bytearray`` as UTF-8. The array is split into three
zones: ``[0, gap_start)`` is the text before the gap, ``[gap_start, gap_end)``
is unused capacity and ``[gap_end, capacity)`` is the text after the gap.
Every position accepted or returned by :class:`TextStore` is a *logical* byte
offset, i.e. one that ignores the gap.

Edits move the gap to the edit point first, so a run of inserts at one
cursor only pays for the copy once; afterwards each insert is a plain write
into the gap. Line starts are cached and rebuilt on the first line/column
query after a mutation.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import List, Optional, Tuple

from .errors import OutOfRangeError

DEFAULT_GAP = 1024


class TextStore:
    """Mutable UTF-8 text container backed by a gap buffer."""

    __slots__ = (
        "_storage",
        "_gap_start",
        "_gap_end",
        "_line_starts",
        "_line_cache_dirty",
        "growth_events",
    )

    def __init__(self, *, initial_gap: int = DEFAULT_GAP) -> None:
        if initial_gap < 0:
            raise ValueError("initial_gap must be >= 0")
        self._storage = bytearray(initial_gap)
        self._gap_start = 0
        self._gap_end = initial_gap
        self._line_starts: List[int] = [0]
        self._line_cache_dirty = False
        self.growth_events = 0

    @classmethod
    def from_text(cls, text: str) -> "TextStore":
        """Build a store holding ``text`` with an empty gap at the end."""

        store = cls(initial_gap=0)
        data = text.encode("utf-8")
        store._storage = bytearray(data)
        store._gap_start = len(data)
        store._gap_end = len(data)
        store._line_cache_dirty = True
        store._rebuild_line_cache()
        return store

    # ------------------------------------------------------------------
    # Size and content
    # ------------------------------------------------------------------
    @property
    def capacity(self) -> int:
        return len(self._storage)

    @property
    def gap_size(self) -> int:
        return self._gap_end - self._gap_start

    @property
    def gap(self) -> Tuple[int, int]:
        return (self._gap_start, self._gap_end)

    def length(self) -> int:
        return len(self._storage) - (self._gap_end - self._gap_start)

    def __len__(self) -> int:
        return self.length()

    def is_empty(self) -> bool:
        return self.length() == 0

    def as_bytes(self) -> bytes:
        return bytes(self._storage[: self._gap_start]) + bytes(
            self._storage[self._gap_end :]
        )

    def as_text(self) -> str:
        return self.as_bytes().decode("utf-8")

    def __str__(self) -> str:
        return self.as_text()

    def __repr__(self) -> str:
        return (
            f"TextStore(length={self.length()}, gap=({self._gap_start}, "
            f"{self._gap_end}), capacity={self.capacity})"
        )

    def text_range(self, start: int, end: int) -> str:
        """Return the logical text in ``[start, end)``, clamped to the store."""

        return self._slice(start, end).decode("utf-8")

    def _slice(self, start: int, end: int) -> bytes:
        length = self.length()
        start = min(max(start, 0), length)
        end = min(max(end, 0), length)
        if start >= end:
            return b""
        gap_size = self._gap_end - self._gap_start
        if end <= self._gap_start:
            return bytes(self._storage[start:end])
        if start >= self._gap_start:
            return bytes(self._storage[start + gap_size : end + gap_size])
        return bytes(self._storage[start : self._gap_start]) + bytes(
            self._storage[self._gap_end : end + gap_size]
        )

    def is_char_boundary(self, offset: int) -> bool:
        """``True`` unless ``offset`` falls inside a multi-byte character."""

        if offset <= 0 or offset >= self.length():
            return True
        return self._slice(offset, offset + 1)[0] & 0xC0 != 0x80

    def align_to_char(self, offset: int) -> int:
        """Clamp ``offset`` and move it back to the start of its character."""

        offset = min(max(offset, 0), self.length())
        if self.is_char_boundary(offset):
            return offset
        return self.prev_char_offset(offset)

    def prev_char_offset(self, offset: int) -> int:
        """Start of the UTF-8 character that ends at ``offset``."""

        offset = min(max(offset, 0), self.length())
        if offset == 0:
            return 0
        window = self._slice(max(0, offset - 4), offset)
        step = 1
        while step < len(window) and window[-step] & 0xC0 == 0x80:
            step += 1
        return offset - step

    def next_char_offset(self, offset: int) -> int:
        """End of the UTF-8 character that starts at ``offset``."""

        length = self.length()
        offset = min(max(offset, 0), length)
        if offset == length:
            return length
        window = self._slice(offset, offset + 4)
        step = 1
        while step < len(window) and window[step] & 0xC0 == 0x80:
            step += 1
        return offset + step

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, pos: int, text: str) -> None:
        """Insert ``text`` at logical byte ``pos``.

        Raises :class:`OutOfRangeError` when ``pos`` is negative, past the
        end or inside a multi-byte character; positions are never clamped
        for inserts.
        """

        length = self.length()
        if pos < 0 or pos > length:
            raise OutOfRangeError(
                f"insert position {pos} outside [0, {length}]",
                position=pos,
                length=length,
            )
        self._check_char_boundary(pos)
        data = text.encode("utf-8")
        if not data:
            return

        self._move_gap(pos)
        needed = len(data)
        gap_size = self._gap_end - self._gap_start
        if needed > gap_size:
            self._grow_gap(max(needed - gap_size, len(self._storage) // 2))

        self._storage[self._gap_start : self._gap_start + needed] = data
        self._gap_start += needed
        self._line_cache_dirty = True

    def delete_range(self, start: int, end: int) -> None:
        """Delete the logical span ``[start, end)``; a no-op when empty.

        Both ends are clamped to the store, but an end that splits a
        multi-byte character raises :class:`OutOfRangeError`.
        """

        if start >= end:
            return

        length = self.length()
        start = min(max(start, 0), length)
        end = min(max(end, 0), length)
        self._check_char_boundary(start)
        self._check_char_boundary(end)

        self._move_gap(end)
        self._gap_start -= end - start
        self._line_cache_dirty = True

    def replace_range(self, start: int, end: int, text: str) -> None:
        """Delete ``[start, end)`` then insert ``text`` at ``start``."""

        self.delete_range(start, end)
        self.insert(start, text)

    def _check_char_boundary(self, pos: int) -> None:
        if not self.is_char_boundary(pos):
            raise OutOfRangeError(
                f"position {pos} splits a UTF-8 character",
                position=pos,
                length=self.length(),
            )

    # ------------------------------------------------------------------
    # Gap management
    # ------------------------------------------------------------------
    def _move_gap(self, pos: int) -> None:
        if pos == self._gap_start:
            return

        if pos < self._gap_start:
            # Text in [pos, gap_start) has to end up right before gap_end.
            move_len = self._gap_start - pos
            self._copy_within(pos, self._gap_start, self._gap_end - move_len)
            self._gap_start -= move_len
            self._gap_end -= move_len
        else:
            # Text right after the gap has to slide down to gap_start.
            move_len = pos - self._gap_start
            self._copy_within(
                self._gap_end, self._gap_end + move_len, self._gap_start
            )
            self._gap_start += move_len
            self._gap_end += move_len

    def _copy_within(self, src_start: int, src_end: int, dest: int) -> None:
        """Copy ``storage[src_start:src_end]`` to ``dest``; spans may overlap."""

        size = len(self._storage)
        count = src_end - src_start
        if not (0 <= src_start <= src_end <= size) or not (
            0 <= dest and dest + count <= size
        ):
            raise OutOfRangeError(
                f"copy of [{src_start}, {src_end}) to {dest} exceeds capacity {size}",
                position=dest,
                length=size,
            )
        if count:
            # The right-hand slice is materialised first, so overlap is safe.
            self._storage[dest : dest + count] = self._storage[src_start:src_end]

    def _grow_gap(self, additional: int) -> None:
        self._storage[self._gap_end : self._gap_end] = bytes(additional)
        self._gap_end += additional
        self.growth_events += 1

    # ------------------------------------------------------------------
    # Line index
    # ------------------------------------------------------------------
    def _rebuild_line_cache_if_needed(self) -> None:
        if self._line_cache_dirty:
            self._rebuild_line_cache()

    def _rebuild_line_cache(self) -> None:
        data = self.as_bytes()
        starts = [0]
        index = data.find(b"\n")
        while index != -1:
            starts.append(index + 1)
            index = data.find(b"\n", index + 1)
        self._line_starts = starts
        self._line_cache_dirty = False

    @property
    def line_cache_dirty(self) -> bool:
        return self._line_cache_dirty

    def line_starts(self) -> Tuple[int, ...]:
        self._rebuild_line_cache_if_needed()
        return tuple(self._line_starts)

    def line_count(self) -> int:
        self._rebuild_line_cache_if_needed()
        return len(self._line_starts)

    def line_span(self, line: int) -> Optional[Tuple[int, int]]:
        """Return ``(start, end)`` of ``line``, ``end`` including its newline."""

        self._rebuild_line_cache_if_needed()
        if line < 0 or line >= len(self._line_starts):
            return None
        start = self._line_starts[line]
        if line + 1 < len(self._line_starts):
            end = self._line_starts[line + 1]
        else:
            end = self.length()
        return (start, end)

    def line_text(self, line: int) -> Optional[str]:
        """Text of ``line`` without its line terminator, ``None`` past the end."""

        span = self.line_span(line)
        if span is None:
            return None
        return self.text_range(*span).rstrip("\n").rstrip("\r")

    def line_col_from_byte(self, byte_index: int) -> Tuple[int, int]:
        self._rebuild_line_cache_if_needed()
        byte_index = min(max(byte_index, 0), self.length())
        line = bisect_left(self._line_starts, byte_index)
        if line == len(self._line_starts) or self._line_starts[line] != byte_index:
            line -= 1
        return (line, byte_index - self._line_starts[line])

    def byte_from_line_col(self, line: int, col: int) -> int:
        """Map ``(line, col)`` to a logical offset.

        A line past the last one maps to ``length()``. The column is clamped
        to the line's span, newline included.
        """

        span = self.line_span(max(line, 0))
        if span is None:
            return self.length()
        start, end = span
        return start + min(max(col, 0), end - start)


__all__ = ["DEFAULT_GAP", "TextStore"]
